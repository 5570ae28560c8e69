"""SQLite driver."""

import contextlib
import datetime
import sqlite3
from collections.abc import Generator
from typing import TYPE_CHECKING, Any

from sqlmark.core.parameters import BindType
from sqlmark.core.statement import StatementConfig
from sqlmark.driver import PreparedStatement, SyncDriverAdapterBase
from sqlmark.exceptions import StatementError
from sqlmark.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlmark.adapters.sqlite._types import SqliteConnection

__all__ = ("SqliteDriver", "SqliteStatement", "sqlite_statement_config")

logger = get_logger("adapters.sqlite")


def _bool_to_int(value: Any) -> int:
    return int(bool(value))


def _to_sqlite_text(value: Any) -> Any:
    if isinstance(value, (str, bytes, bytearray)):
        return value
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


sqlite_statement_config = StatementConfig(
    dialect="sqlite",
    bind_type_coercions={BindType.BOOLEAN: _bool_to_int, BindType.STRING: _to_sqlite_text},
    insert_ignore_verb="INSERT OR IGNORE",
    supports_table_locks=False,
)


class SqliteStatement(PreparedStatement):
    """Prepared statement for ``sqlite3``, which accepts ``?`` and ``:name`` natively."""

    __slots__ = ()

    def render(self) -> "tuple[str, Any]":
        if self.is_named:
            return self.sql, {name.lstrip(":"): value for name, value in self.named_parameters().items()}
        if self.has_bindings:
            return self.sql, tuple(self.positional_parameters())
        return self.sql, None


class SqliteDriver(SyncDriverAdapterBase):
    """Synchronous SQLite driver."""

    __slots__ = ()

    dialect = "sqlite"

    def __init__(
        self,
        connection: "SqliteConnection",
        statement_config: "StatementConfig | None" = None,
    ) -> None:
        super().__init__(connection=connection, statement_config=statement_config or sqlite_statement_config)

    def prepare_statement(self, sql: str) -> SqliteStatement:
        return SqliteStatement(self.connection, sql, self.statement_config.bind_type_coercions)

    @contextlib.contextmanager
    def handle_database_exceptions(self, sql: "str | None" = None) -> "Generator[None, None, None]":
        """Wrap ``sqlite3`` errors in ``StatementError``."""
        try:
            yield
        except sqlite3.Error as e:
            msg = f"SQLite database error: {e}"
            raise StatementError(msg, sql) from e

    def begin(self) -> None:
        """Begin a database transaction."""
        with self.handle_database_exceptions("BEGIN"):
            self.connection.execute("BEGIN")
        logger.debug("Started SQLite transaction")

    def commit(self) -> None:
        """Commit the current transaction."""
        with self.handle_database_exceptions("COMMIT"):
            self.connection.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        with self.handle_database_exceptions("ROLLBACK"):
            self.connection.rollback()

    def get_last_insert_id(self) -> "int | None":
        with self.handle_database_exceptions("SELECT last_insert_rowid()"):
            row = self.connection.execute("SELECT last_insert_rowid()").fetchone()
        return int(row[0]) if row is not None else None
