"""Tests for statement results and row shaping."""

from unittest.mock import MagicMock

import pytest

from sqlmark.core.compiler import CompiledStatement
from sqlmark.core.parameters import BindingQueue
from sqlmark.core.result import StatementResult
from sqlmark.exceptions import StatementError


@pytest.fixture
def select_statement() -> CompiledStatement:
    return CompiledStatement("SELECT id, name FROM users", BindingQueue(), operation_type="SELECT")


@pytest.fixture
def result(select_statement: CompiledStatement) -> StatementResult:
    return StatementResult(
        select_statement,
        data=[(1, "alice"), (2, "bob"), (1, "carol")],
        column_names=["id", "name"],
        rows_affected=3,
    )


def test_all_returns_dict_rows(result: StatementResult) -> None:
    assert result.all() == [
        {"id": 1, "name": "alice"},
        {"id": 2, "name": "bob"},
        {"id": 1, "name": "carol"},
    ]
    assert list(result) == result.all()
    assert len(result) == 3


def test_one_scalar_and_column(result: StatementResult) -> None:
    assert result.one() == {"id": 1, "name": "alice"}
    assert result.scalar() == 1
    assert result.scalar(1) == "alice"
    assert result.column() == [1, 2, 1]
    assert result.column(1) == ["alice", "bob", "carol"]


def test_key_value_later_rows_win(result: StatementResult) -> None:
    """Rows sharing a key overwrite earlier rows."""
    assert result.key_value() == {1: "carol", 2: "bob"}


def test_empty_result_shapes(select_statement: CompiledStatement) -> None:
    empty = StatementResult(select_statement)

    assert empty.all() == []
    assert empty.one() is None
    assert empty.scalar() is None
    assert empty.column() == []
    assert empty.key_value() == {}
    assert empty.rows_affected == 0


def test_statement_accessors(result: StatementResult) -> None:
    assert result.sql == "SELECT id, name FROM users"
    assert result.operation_type == "SELECT"
    assert result.is_success()
    assert "rows=3" in repr(result)


def test_last_insert_id_is_loaded_once(select_statement: CompiledStatement) -> None:
    loader = MagicMock(return_value=42)
    result = StatementResult(select_statement, last_insert_id_loader=loader)

    assert result.last_insert_id == 42
    assert result.last_insert_id == 42
    loader.assert_called_once_with()


def test_failed_result(select_statement: CompiledStatement) -> None:
    """Failed results are empty, carry the error and never load an insert id."""
    error = StatementError("boom", select_statement.sql)
    failed = StatementResult.failed(select_statement, error)

    assert not failed.is_success()
    assert failed.error is error
    assert failed.all() == []
    assert failed.rows_affected == 0
    assert failed.last_insert_id is None
    assert "failed" in repr(failed)
