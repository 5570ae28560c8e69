from collections.abc import Generator

import pytest

from sqlmark.adapters.sqlite import SqliteConfig, SqliteDriver


@pytest.fixture
def sqlite_config() -> SqliteConfig:
    """In-memory SQLite configuration."""
    return SqliteConfig(connection_config={"database": ":memory:"})


@pytest.fixture
def sqlite_session(sqlite_config: SqliteConfig) -> "Generator[SqliteDriver, None, None]":
    """SQLite driver with a ``users`` table holding three rows."""
    with sqlite_config.provide_session() as session:
        session.execute(
            "CREATE TABLE users ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "name TEXT NOT NULL UNIQUE, "
            "age INTEGER, "
            "active INTEGER DEFAULT 1)"
        )
        session.insert(
            "users",
            [
                {"name": "alice", "age": 30, "active": True},
                {"name": "bob", "age": 25, "active": False},
                {"name": "carol", "age": None, "active": True},
            ],
        )
        yield session
