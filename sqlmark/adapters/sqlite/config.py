"""SQLite database configuration."""

import sqlite3
from typing import TYPE_CHECKING, Any, ClassVar, TypedDict

from typing_extensions import NotRequired

from sqlmark.adapters.sqlite._types import SqliteConnection
from sqlmark.adapters.sqlite.driver import SqliteDriver, sqlite_statement_config
from sqlmark.config import NoPoolSyncConfig
from sqlmark.exceptions import DatabaseConnectionError
from sqlmark.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlmark.core.statement import StatementConfig

logger = get_logger("adapters.sqlite.config")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[str | None]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


__all__ = ("SqliteConfig", "SqliteConnectionParams")


class SqliteConfig(NoPoolSyncConfig[SqliteConnection, SqliteDriver]):
    """SQLite configuration opening one connection per session.

    Connections default to autocommit (``isolation_level=None``) so that
    :meth:`SqliteDriver.begin` controls transactions explicitly.
    """

    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver
    connection_type: "ClassVar[type[SqliteConnection]]" = SqliteConnection

    def __init__(
        self,
        *,
        connection_config: "SqliteConnectionParams | dict[str, Any] | None" = None,
        statement_config: "StatementConfig | None" = None,
    ) -> None:
        config = dict(connection_config or {})
        config.setdefault("database", ":memory:")
        config.setdefault("isolation_level", None)
        database_path = str(config["database"])
        if database_path.startswith("file:") and not config.get("uri"):
            logger.debug("Database URI detected (%s) but uri=True not set, enabling URI mode", database_path)
            config["uri"] = True
        super().__init__(connection_config=config, statement_config=statement_config)

    def default_statement_config(self) -> "StatementConfig":
        return sqlite_statement_config

    def _connection_kwargs(self) -> "dict[str, Any]":
        # isolation_level=None is meaningful for sqlite3, keep it
        return dict(self.connection_config)

    def create_connection(self) -> SqliteConnection:
        """Open a new SQLite connection.

        Raises:
            DatabaseConnectionError: If the database cannot be opened.
        """
        try:
            return sqlite3.connect(**self._connection_kwargs())
        except sqlite3.Error as e:
            msg = f"Could not open SQLite database {self.connection_config.get('database')!r}: {e}"
            raise DatabaseConnectionError(msg) from e
