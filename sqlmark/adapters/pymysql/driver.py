"""PyMySQL driver.

PyMySQL uses the ``format`` and ``pyformat`` paramstyles, so compiled SQL is
rendered before execution: literal ``%`` signs are doubled, ``?`` becomes
``%s`` and every bound ``:name`` marker becomes ``%(name)s``. Question marks
and markers inside quoted literals are left alone.
"""

import contextlib
import re
from collections.abc import Generator
from typing import TYPE_CHECKING, Any, Final

from sqlmark.adapters.pymysql._types import pymysql
from sqlmark.core.statement import StatementConfig
from sqlmark.driver import PreparedStatement, SyncDriverAdapterBase
from sqlmark.exceptions import StatementError
from sqlmark.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlmark.adapters.pymysql._types import PyMysqlConnection

__all__ = ("PyMysqlDriver", "PyMysqlStatement", "default_statement_config", "render_pyformat")

logger = get_logger("adapters.pymysql")

_RENDER_REGEX: Final = re.compile(
    r"""
    (?P<quoted>'(?:[^'\\]|\\.|'')*'|"(?:[^"\\]|\\.|"")*"|`[^`]*`)
    | (?P<qmark>\?)
    | (?P<named>:[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE | re.DOTALL,
)

default_statement_config = StatementConfig(dialect="mysql")


def render_pyformat(sql: str, named: "set[str] | None" = None) -> str:
    """Render ``?`` and ``:name`` markers in the PyMySQL paramstyle.

    Args:
        sql: Compiled SQL with ``?`` placeholders or ``:name`` markers
        named: Bound marker names, including the leading colon. Markers that
            were not bound are kept verbatim.

    Returns:
        SQL ready for ``cursor.execute(sql, parameters)``
    """
    named = named or set()

    def _replace(match: "re.Match[str]") -> str:
        if match.group("quoted") is not None:
            return match.group("quoted").replace("%", "%%")
        if match.group("qmark") is not None:
            return "%s" if not named else "?"
        marker = match.group("named")
        if marker in named:
            return f"%({marker[1:]})s"
        return marker

    parts = []
    last_end = 0
    for match in _RENDER_REGEX.finditer(sql):
        parts.append(sql[last_end : match.start()].replace("%", "%%"))
        parts.append(_replace(match))
        last_end = match.end()
    parts.append(sql[last_end:].replace("%", "%%"))
    return "".join(parts)


class PyMysqlStatement(PreparedStatement):
    """Prepared statement rendered into PyMySQL's ``%s`` / ``%(name)s`` paramstyle."""

    __slots__ = ()

    def render(self) -> "tuple[str, Any]":
        if self.is_named:
            named = self.named_parameters()
            return render_pyformat(self.sql, set(named)), {name[1:]: value for name, value in named.items()}
        if self.has_bindings:
            return render_pyformat(self.sql), tuple(self.positional_parameters())
        # no parameters: PyMySQL skips %-interpolation, send the SQL untouched
        return self.sql, None


class PyMysqlDriver(SyncDriverAdapterBase):
    """Synchronous MySQL driver built on PyMySQL."""

    __slots__ = ()

    dialect = "mysql"

    def __init__(
        self,
        connection: "PyMysqlConnection",
        statement_config: "StatementConfig | None" = None,
    ) -> None:
        super().__init__(connection=connection, statement_config=statement_config or default_statement_config)

    def prepare_statement(self, sql: str) -> PyMysqlStatement:
        return PyMysqlStatement(self.connection, sql, self.statement_config.bind_type_coercions)

    @contextlib.contextmanager
    def handle_database_exceptions(self, sql: "str | None" = None) -> "Generator[None, None, None]":
        """Wrap PyMySQL errors in ``StatementError``."""
        try:
            yield
        except pymysql.Error as e:
            error_code = e.args[0] if e.args else None
            msg = f"MySQL database error [{error_code}]: {e}"
            raise StatementError(msg, sql) from e

    def begin(self) -> None:
        """Begin a database transaction."""
        with self.handle_database_exceptions("BEGIN"):
            self.connection.begin()
        logger.debug("Started MySQL transaction")

    def commit(self) -> None:
        """Commit the current transaction."""
        with self.handle_database_exceptions("COMMIT"):
            self.connection.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        with self.handle_database_exceptions("ROLLBACK"):
            self.connection.rollback()

    def get_last_insert_id(self) -> "int | None":
        with self.handle_database_exceptions():
            insert_id = self.connection.insert_id()
        return int(insert_id) if insert_id else None
