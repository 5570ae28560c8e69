"""Statement execution results.

A :class:`StatementResult` is returned for every executed statement. It keeps
the raw driver rows as tuples together with the column names and shapes them
on request (dict rows, first row, scalar, first column, key/value pairs).
"""

from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING, Any

from mypy_extensions import mypyc_attr

if TYPE_CHECKING:
    from sqlmark.core.compiler import CompiledStatement
    from sqlmark.exceptions import SQLMarkError

__all__ = ("StatementResult",)


_UNSET: Any = object()


@mypyc_attr(allow_interpreted_subclasses=True)
class StatementResult:
    """Result of one compile, prepare, bind and execute cycle.

    Args:
        statement: The compiled statement that was executed.
        data: Raw rows as sequences, in column order.
        column_names: Names of the result columns.
        rows_affected: Number of rows affected, as reported by the driver.
        last_insert_id_loader: Callable returning the last inserted id; called at most once.
        error: The error that was logged instead of raised, for failed results.
        execution_time: Time taken to execute the statement in seconds.
    """

    __slots__ = (
        "_last_insert_id",
        "_last_insert_id_loader",
        "column_names",
        "data",
        "error",
        "execution_time",
        "rows_affected",
        "statement",
    )

    def __init__(
        self,
        statement: "CompiledStatement",
        data: "Sequence[Sequence[Any]] | None" = None,
        column_names: "Sequence[str] | None" = None,
        rows_affected: int = 0,
        last_insert_id_loader: "Callable[[], Any] | None" = None,
        error: "SQLMarkError | None" = None,
        execution_time: "float | None" = None,
    ) -> None:
        self.statement = statement
        self.data: list[Sequence[Any]] = list(data) if data else []
        self.column_names: list[str] = list(column_names) if column_names else []
        self.rows_affected = rows_affected
        self.error = error
        self.execution_time = execution_time
        self._last_insert_id_loader = last_insert_id_loader
        self._last_insert_id: Any = _UNSET

    @classmethod
    def failed(cls, statement: "CompiledStatement", error: "SQLMarkError") -> "StatementResult":
        """Build the empty result returned when an error is not raised."""
        return cls(statement, error=error)

    def is_success(self) -> bool:
        return self.error is None

    @property
    def sql(self) -> str:
        return self.statement.sql

    @property
    def operation_type(self) -> str:
        return self.statement.operation_type

    @property
    def last_insert_id(self) -> Any:
        """Last inserted id, fetched from the connection on first access."""
        if self._last_insert_id is _UNSET:
            loader = self._last_insert_id_loader
            self._last_insert_id = loader() if loader is not None and self.is_success() else None
        return self._last_insert_id

    def all(self) -> "list[dict[str, Any]]":
        """Return every row as a dict keyed by column name."""
        names = self.column_names
        return [dict(zip(names, row)) for row in self.data]

    def one(self) -> "dict[str, Any] | None":
        """Return the first row, or None when there are no rows."""
        if not self.data:
            return None
        return dict(zip(self.column_names, self.data[0]))

    def scalar(self, column_index: int = 0) -> Any:
        """Return one column of the first row, or None when there are no rows."""
        if not self.data:
            return None
        return self.data[0][column_index]

    def column(self, column_index: int = 0) -> "list[Any]":
        """Return one column from every row."""
        return [row[column_index] for row in self.data]

    def key_value(self) -> "dict[Any, Any]":
        """Map the first column of every row to its second column.

        Later rows overwrite earlier rows that share a key.
        """
        return {row[0]: row[1] for row in self.data}

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> "Iterator[dict[str, Any]]":
        return iter(self.all())

    def __repr__(self) -> str:
        status = "ok" if self.is_success() else f"failed: {self.error!r}"
        return (
            f"StatementResult(sql={self.sql!r}, rows={len(self.data)}, "
            f"rows_affected={self.rows_affected}, status={status})"
        )
