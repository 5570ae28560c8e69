"""Prepared statements over DB-API cursors.

DB-API drivers accept SQL and parameters in one ``cursor.execute`` call.
:class:`PreparedStatement` adds the prepare, bind and execute phases the
executor works with: values are bound one by one, by 1-based position or by
``:name`` marker, coerced for their bind type, and rendered into the driver's
paramstyle only when the statement executes.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from sqlmark.core.parameters import BindType, coerce_bind_value
from sqlmark.exceptions import MissingParameterError, ParameterError
from sqlmark.protocols import DBAPIConnectionProtocol, DBAPICursorProtocol

__all__ = ("PreparedStatement",)


class PreparedStatement(ABC):
    """A statement prepared on a connection, waiting for bound values.

    Subclasses implement :meth:`render` to produce the SQL and parameter
    payload in their driver's paramstyle.
    """

    __slots__ = (
        "_column_names",
        "_coercions",
        "_data",
        "_last_row_id",
        "_named",
        "_positional",
        "_row_count",
        "connection",
        "sql",
    )

    def __init__(
        self,
        connection: DBAPIConnectionProtocol,
        sql: str,
        coercions: "Mapping[BindType, Callable[[Any], Any]] | None" = None,
    ) -> None:
        self.connection = connection
        self.sql = sql
        self._coercions = coercions
        self._positional: dict[int, Any] = {}
        self._named: dict[str, Any] = {}
        self._data: list[Sequence[Any]] = []
        self._column_names: list[str] = []
        self._row_count = 0
        self._last_row_id: Any = None

    def bind(self, key: "int | str", value: Any, bind_type: BindType) -> None:
        """Bind a value by 1-based position or by ``:name`` marker.

        Raises:
            ParameterError: If positional and named binds are mixed, or the position is below 1.
        """
        coerced = coerce_bind_value(value, bind_type, self._coercions)
        if isinstance(key, str):
            if self._positional:
                msg = "Cannot mix named and positional bindings on one statement"
                raise ParameterError(msg, self.sql)
            self._named[key] = coerced
            return
        if key < 1:
            msg = f"Parameter positions start at 1, got {key}"
            raise ParameterError(msg, self.sql)
        if self._named:
            msg = "Cannot mix named and positional bindings on one statement"
            raise ParameterError(msg, self.sql)
        self._positional[key] = coerced

    def positional_parameters(self) -> "list[Any]":
        """Bound positional values in position order.

        Raises:
            MissingParameterError: If a position between 1 and the highest bound one is unbound.
        """
        count = len(self._positional)
        if count and max(self._positional) != count:
            missing = sorted(set(range(1, max(self._positional) + 1)) - set(self._positional))
            msg = f"Positions {missing} were never bound"
            raise MissingParameterError(msg, self.sql)
        return [self._positional[position] for position in range(1, count + 1)]

    def named_parameters(self) -> "dict[str, Any]":
        return dict(self._named)

    @property
    def is_named(self) -> bool:
        return bool(self._named)

    @property
    def has_bindings(self) -> bool:
        return bool(self._named or self._positional)

    @abstractmethod
    def render(self) -> "tuple[str, Any]":
        """Render the SQL and parameters in the driver's paramstyle.

        Returns:
            Tuple of (sql, parameters); parameters is None when nothing was bound.
        """

    def execute(self) -> bool:
        """Execute the statement and buffer its rows.

        Driver exceptions propagate to the caller.

        Returns:
            True once the statement has executed.
        """
        sql, parameters = self.render()
        cursor: DBAPICursorProtocol = self.connection.cursor()
        try:
            if parameters is None:
                cursor.execute(sql)
            else:
                cursor.execute(sql, parameters)
            description = cursor.description
            if description:
                self._column_names = [column[0] for column in description]
                self._data = list(cursor.fetchall())
            else:
                self._column_names = []
                self._data = []
            rowcount = cursor.rowcount
            self._row_count = rowcount if isinstance(rowcount, int) and rowcount > 0 else 0
            if description and self._row_count == 0:
                self._row_count = len(self._data)
            self._last_row_id = getattr(cursor, "lastrowid", None)
        finally:
            cursor.close()
        return True

    def fetch_all(self) -> "list[Sequence[Any]]":
        return list(self._data)

    def fetch_one(self) -> "Sequence[Any] | None":
        return self._data[0] if self._data else None

    def fetch_value(self, column_index: int = 0) -> Any:
        row = self.fetch_one()
        return row[column_index] if row is not None else None

    def column_names(self) -> "list[str]":
        return list(self._column_names)

    def row_count(self) -> int:
        return self._row_count

    def last_row_id(self) -> Any:
        return self._last_row_id

    def close(self) -> None:
        """Release the buffered rows."""
        self._data = []
        self._column_names = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, row_count={self._row_count})"
