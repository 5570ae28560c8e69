import pytest

from sqlmark.exceptions import (
    DatabaseConnectionError,
    ExtraParameterError,
    ImproperConfigurationError,
    MalformedTemplateError,
    MissingDependencyError,
    MissingParameterError,
    ParameterError,
    ParameterStyleMismatchError,
    SQLMarkError,
    StatementError,
    wrap_exceptions,
)


def test_exception_hierarchy() -> None:
    """Every sqlmark exception derives from SQLMarkError."""
    assert issubclass(MalformedTemplateError, ParameterError)
    assert issubclass(MissingParameterError, ParameterError)
    assert issubclass(ExtraParameterError, ParameterError)

    for exc_type in (
        DatabaseConnectionError,
        ImproperConfigurationError,
        MissingDependencyError,
        ParameterError,
        ParameterStyleMismatchError,
        StatementError,
    ):
        assert issubclass(exc_type, SQLMarkError)

    assert issubclass(MissingDependencyError, ImportError)


def test_base_error_detail() -> None:
    exc = SQLMarkError("something failed")

    assert exc.detail == "something failed"
    assert str(exc) == "something failed"
    assert repr(exc) == "SQLMarkError - something failed"
    assert repr(SQLMarkError()) == "SQLMarkError"


def test_statement_error_carries_sql() -> None:
    exc = StatementError("no such table", "SELECT * FROM missing")

    assert exc.sql == "SELECT * FROM missing"
    assert str(exc) == "no such table\nSQL: SELECT * FROM missing"
    assert StatementError("boom").sql is None
    assert str(StatementError("boom")) == "boom"


def test_parameter_error_carries_sql() -> None:
    exc = MalformedTemplateError("Unknown placeholder token '?|'", "SELECT ?|")

    assert exc.sql == "SELECT ?|"
    assert "Unknown placeholder token" in exc.detail


def test_parameter_style_mismatch_default_message() -> None:
    exc = ParameterStyleMismatchError(sql="SELECT 1")

    assert "Parameter style mismatch" in str(exc)
    assert exc.sql == "SELECT 1"


def test_database_connection_error_default_message() -> None:
    assert str(DatabaseConnectionError()) == "Could not connect to the database."


def test_missing_dependency_error_message() -> None:
    exc = MissingDependencyError("pymysql")

    assert "pip install sqlmark[pymysql]" in str(exc)


def test_wrap_exceptions() -> None:
    """Unexpected errors are wrapped; sqlmark errors pass through untouched."""
    with pytest.raises(SQLMarkError) as exc_info:
        with wrap_exceptions():
            raise ValueError("bad value")
    assert isinstance(exc_info.value.__cause__, ValueError)

    with pytest.raises(StatementError):
        with wrap_exceptions():
            raise StatementError("boom")

    with pytest.raises(KeyError):
        with wrap_exceptions(wrap_exceptions=False):
            raise KeyError("missing")
