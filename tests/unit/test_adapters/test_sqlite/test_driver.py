"""Tests for the SQLite driver against an in-memory database."""

import sqlite3

import pytest

from sqlmark.adapters.sqlite import SqliteConfig, SqliteDriver, SqliteStatement, sqlite_statement_config
from sqlmark.core.parameters import BindType
from sqlmark.exceptions import ParameterStyleMismatchError, StatementError


def test_driver_defaults() -> None:
    connection = sqlite3.connect(":memory:")
    try:
        driver = SqliteDriver(connection=connection)

        assert driver.dialect == "sqlite"
        assert driver.statement_config is sqlite_statement_config
        assert driver.statement_config.insert_ignore_verb == "INSERT OR IGNORE"
        assert driver.statement_config.supports_table_locks is False
    finally:
        connection.close()


def test_statement_render_styles() -> None:
    """Positional binds render as a tuple, named binds as a dict without colons."""
    connection = sqlite3.connect(":memory:")
    try:
        positional = SqliteStatement(connection, "SELECT ?, ?")
        positional.bind(1, "a", BindType.STRING)
        positional.bind(2, 2, BindType.INTEGER)
        named = SqliteStatement(connection, "SELECT :id")
        named.bind(":id", 5, BindType.INTEGER)

        assert positional.render() == ("SELECT ?, ?", ("a", 2))
        assert named.render() == ("SELECT :id", {"id": 5})
        assert SqliteStatement(connection, "SELECT 1").render() == ("SELECT 1", None)
    finally:
        connection.close()


def test_select_shapes(sqlite_session: SqliteDriver) -> None:
    assert sqlite_session.select("SELECT name, age FROM users ORDER BY id") == [
        {"name": "alice", "age": 30},
        {"name": "bob", "age": 25},
        {"name": "carol", "age": None},
    ]
    assert sqlite_session.select_one("SELECT name FROM users WHERE age = ?i", 25) == {"name": "bob"}
    assert sqlite_session.select_value("SELECT COUNT(*) FROM users") == 3
    assert sqlite_session.select_column("SELECT name FROM users ORDER BY id") == ["alice", "bob", "carol"]
    assert sqlite_session.select_key_value("SELECT id, name FROM users ORDER BY id") == {
        1: "alice",
        2: "bob",
        3: "carol",
    }


def test_booleans_are_stored_as_integers(sqlite_session: SqliteDriver) -> None:
    assert sqlite_session.select_column("SELECT active FROM users ORDER BY id") == [1, 0, 1]
    assert sqlite_session.select_column("SELECT name FROM users WHERE active = ?b ORDER BY id", True) == [
        "alice",
        "carol",
    ]


def test_named_mode(sqlite_session: SqliteDriver) -> None:
    row = sqlite_session.select_one("SELECT name FROM users WHERE id = :id AND age > :age", {":id": 1, ":age": 20})

    assert row == {"name": "alice"}


def test_array_and_null_tokens(sqlite_session: SqliteDriver) -> None:
    names = sqlite_session.select_column("SELECT name FROM users WHERE id IN (?a) ORDER BY id", [1, 3])
    by_name = sqlite_session.select_column("SELECT id FROM users WHERE name IN (?j) ORDER BY id", ("bob", "carol"))
    missing_age = sqlite_session.select_value("SELECT name FROM users WHERE age IS ?n", None)

    assert names == ["alice", "carol"]
    assert by_name == [2, 3]
    assert missing_age == "carol"


def test_column_map_update(sqlite_session: SqliteDriver) -> None:
    """Column map values bind as strings and take the column's affinity."""
    affected = sqlite_session.execute("UPDATE users SET ?h WHERE id = ?i", {"age": 41, "name": "alicia"}, 1)

    assert affected == 1
    assert sqlite_session.get_affected_row_count() == 1
    assert sqlite_session.select_one("SELECT name, age FROM users WHERE ?w", {"name": "alicia", "age": 41}) == {
        "name": "alicia",
        "age": 41,
    }


def test_stripped_string_and_raw_tokens(sqlite_session: SqliteDriver) -> None:
    sqlite_session.execute("UPDATE users SET name = ?q WHERE id = ?i", "<b>dave</b>", 2)

    assert sqlite_session.select_column("SELECT name FROM users ORDER BY ?r", "id DESC") == ["carol", "dave", "alice"]


def test_insert_and_last_insert_id(sqlite_session: SqliteDriver) -> None:
    result = sqlite_session.query("INSERT INTO users (name, age, active) VALUES (?s, ?i, ?b)", "eve", 33, False)

    assert result.rows_affected == 1
    assert result.operation_type == "INSERT"
    assert result.last_insert_id == 4
    assert sqlite_session.get_last_insert_id() == 4


def test_insert_rows_with_columns(sqlite_session: SqliteDriver) -> None:
    affected = sqlite_session.insert("users", [["frank", 50], ["grace", 51]], columns=["name", "age"])

    assert affected == 2
    assert sqlite_session.select_value("SELECT COUNT(*) FROM users") == 5


def test_insert_ignore_skips_duplicates(sqlite_session: SqliteDriver) -> None:
    assert sqlite_session.insert_ignore("users", {"name": "alice", "age": 99}) == 0
    assert sqlite_session.select_value("SELECT age FROM users WHERE name = ?s", "alice") == 30


def test_replace_overwrites_row(sqlite_session: SqliteDriver) -> None:
    sqlite_session.replace("users", {"id": 1, "name": "alice", "age": 31, "active": True})

    assert sqlite_session.select_value("SELECT age FROM users WHERE id = ?i", 1) == 31
    assert sqlite_session.select_value("SELECT COUNT(*) FROM users") == 3


def test_transactions(sqlite_session: SqliteDriver) -> None:
    sqlite_session.begin()
    sqlite_session.execute("DELETE FROM users")
    sqlite_session.rollback()
    assert sqlite_session.select_value("SELECT COUNT(*) FROM users") == 3

    sqlite_session.begin()
    sqlite_session.execute("DELETE FROM users WHERE id = ?i", 3)
    sqlite_session.commit()
    assert sqlite_session.select_value("SELECT COUNT(*) FROM users") == 2


def test_strict_errors_carry_sql(sqlite_session: SqliteDriver) -> None:
    with pytest.raises(StatementError) as exc_info:
        sqlite_session.select("SELECT * FROM missing_table WHERE id = ?i", 1)

    assert exc_info.value.sql == "SELECT * FROM missing_table WHERE id = ?"
    assert "no such table" in str(exc_info.value)


def test_non_strict_errors_return_empty(sqlite_config: SqliteConfig) -> None:
    with sqlite_config.provide_session(statement_config=sqlite_statement_config.replace(strict=False)) as session:
        assert session.select("SELECT * FROM missing_table") == []
        assert session.last_result is not None
        assert isinstance(session.last_result.error, StatementError)


def test_constraint_violation_raises(sqlite_session: SqliteDriver) -> None:
    with pytest.raises(StatementError, match="UNIQUE"):
        sqlite_session.insert("users", {"name": "bob"})


def test_lock_not_supported(sqlite_session: SqliteDriver) -> None:
    with pytest.raises(StatementError, match="does not support table locks"):
        sqlite_session.lock("users")


def test_parameter_style_mismatch(sqlite_session: SqliteDriver) -> None:
    with pytest.raises(ParameterStyleMismatchError):
        sqlite_session.select("SELECT * FROM users WHERE id = :id", {"id": 1})
