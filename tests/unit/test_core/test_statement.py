"""Tests for statement configuration and operation detection."""

import pytest

from sqlmark.core.parameters import DEFAULT_BIND_TYPE_COERCIONS, BindType
from sqlmark.core.statement import StatementConfig, detect_operation_type


def test_statement_config_defaults() -> None:
    config = StatementConfig()

    assert config.dialect == "mysql"
    assert config.strict is True
    assert config.enable_parsing is True
    assert config.insert_ignore_verb == "INSERT IGNORE"
    assert config.supports_table_locks is True
    assert config.template_cache_size == 1000
    assert config.bind_type_coercions == dict(DEFAULT_BIND_TYPE_COERCIONS)


def test_statement_config_merges_coercions() -> None:
    """Custom coercions override only the bind types they name."""
    config = StatementConfig(bind_type_coercions={BindType.BOOLEAN: int})

    assert config.bind_type_coercions[BindType.BOOLEAN] is int
    assert config.bind_type_coercions[BindType.INTEGER] is DEFAULT_BIND_TYPE_COERCIONS[BindType.INTEGER]


def test_statement_config_replace() -> None:
    config = StatementConfig(dialect="sqlite")
    relaxed = config.replace(strict=False)

    assert relaxed is not config
    assert relaxed.strict is False
    assert relaxed.dialect == "sqlite"
    assert config.strict is True


def test_statement_config_replace_rejects_unknown_attributes() -> None:
    with pytest.raises(TypeError, match="fetch_mode"):
        StatementConfig().replace(fetch_mode="assoc")


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("SELECT * FROM t WHERE id = ?", "SELECT"),
        ("WITH x AS (SELECT 1 AS a) SELECT a FROM x", "SELECT"),
        ("SELECT 1 UNION SELECT 2", "SELECT"),
        ("INSERT INTO t (a) VALUES (?)", "INSERT"),
        ("UPDATE t SET a = ? WHERE id = ?", "UPDATE"),
        ("DELETE FROM t WHERE id = ?", "DELETE"),
        ("CREATE TABLE t (id INT)", "DDL"),
        ("DROP TABLE t", "DDL"),
        ("REPLACE INTO t (a) VALUES (?)", "INSERT"),
        ("LOCK TABLES t WRITE", "EXECUTE"),
        ("", "UNKNOWN"),
    ],
)
def test_detect_operation_type(sql: str, expected: str) -> None:
    assert detect_operation_type(sql, dialect="mysql") == expected


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("  select 1", "SELECT"),
        ("(SELECT 1)", "SELECT"),
        ("insert into t values (1)", "INSERT"),
        ("TRUNCATE t", "DDL"),
        ("UNLOCK TABLES", "EXECUTE"),
        ("   ", "UNKNOWN"),
    ],
)
def test_detect_operation_type_keyword_fallback(sql: str, expected: str) -> None:
    assert detect_operation_type(sql, enable_parsing=False) == expected


def test_detect_operation_type_unparseable_sql() -> None:
    """SQL sqlglot cannot parse falls back to its leading keyword."""
    assert detect_operation_type("SELECT FROM WHERE ((", dialect="mysql") == "SELECT"
