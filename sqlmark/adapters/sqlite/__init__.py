"""SQLite adapter for sqlmark."""

from sqlmark.adapters.sqlite._types import SqliteConnection
from sqlmark.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlmark.adapters.sqlite.driver import SqliteDriver, SqliteStatement, sqlite_statement_config

__all__ = (
    "SqliteConfig",
    "SqliteConnection",
    "SqliteConnectionParams",
    "SqliteDriver",
    "SqliteStatement",
    "sqlite_statement_config",
)
