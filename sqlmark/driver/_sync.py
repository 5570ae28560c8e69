"""Synchronous statement executor."""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

from sqlmark.core.result import StatementResult
from sqlmark.driver._common import (
    INSERT_VERB,
    REPLACE_VERB,
    CommonDriverAttributesMixin,
    build_lock_statement,
)
from sqlmark.exceptions import StatementError, wrap_exceptions
from sqlmark.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqlmark.core.compiler import CompiledStatement
    from sqlmark.core.parameters import BindingQueue
    from sqlmark.driver._prepared import PreparedStatement
    from sqlmark.typing import InsertRows

__all__ = ("SyncDriverAdapterBase",)

logger = get_logger("driver")


class SyncDriverAdapterBase(CommonDriverAttributesMixin, ABC):
    """Executes placeholder templates on one DB-API connection.

    Every call compiles its template, prepares the rewritten SQL, binds the
    queued values and executes. A driver instance is not safe for concurrent
    use; share the config, not the driver.
    """

    __slots__ = ()

    @abstractmethod
    def prepare_statement(self, sql: str) -> "PreparedStatement":
        """Prepare compiled SQL on the current connection."""

    @abstractmethod
    def handle_database_exceptions(self, sql: "str | None" = None) -> "AbstractContextManager[None]":
        """Context manager translating driver exceptions into ``StatementError``."""

    @abstractmethod
    def begin(self) -> None:
        """Begin a database transaction on the current connection."""

    @abstractmethod
    def commit(self) -> None:
        """Commit the current transaction on the current connection."""

    @abstractmethod
    def rollback(self) -> None:
        """Rollback the current transaction on the current connection."""

    @abstractmethod
    def get_last_insert_id(self) -> "int | None":
        """Return the id generated by the last insert on this connection."""

    def bind_queue(self, prepared: "PreparedStatement", queue: "BindingQueue") -> None:
        """Drain a binding queue onto a prepared statement.

        Entries with a name bind by name, the rest by their 1-based position.
        """
        for position, entry in queue.drain():
            prepared.bind(entry.name if entry.name is not None else position, entry.value, entry.bind_type)

    def run(self, compiled: "CompiledStatement") -> StatementResult:
        """Prepare, bind and execute a compiled statement.

        Raises:
            StatementError: If preparing or executing fails and the statement config is strict.

        Returns:
            The statement result; an empty failed result when the error was logged instead.
        """
        self._last_result = None
        bind_count = len(compiled.queue)
        started = time.perf_counter()
        try:
            with self.handle_database_exceptions(compiled.sql):
                prepared = self.prepare_statement(compiled.sql)
                self.bind_queue(prepared, compiled.queue)
                prepared.execute()
        except StatementError as exc:
            if self.statement_config.strict:
                raise
            log_with_context(
                logger,
                logging.WARNING,
                f"Statement failed, returning empty result: {exc.detail}",
                operation=compiled.operation_type,
                sql=compiled.sql,
                bind_count=bind_count,
            )
            result = StatementResult.failed(compiled, exc)
        else:
            result = StatementResult(
                compiled,
                data=prepared.fetch_all(),
                column_names=prepared.column_names(),
                rows_affected=prepared.row_count(),
                last_insert_id_loader=prepared.last_row_id,
                execution_time=time.perf_counter() - started,
            )
            log_with_context(
                logger,
                logging.DEBUG,
                f"Executed {compiled.operation_type} statement",
                operation=compiled.operation_type,
                sql=compiled.sql,
                bind_count=bind_count,
                rows_affected=result.rows_affected,
                execution_time=result.execution_time,
            )
        self._last_result = result
        return result

    def query(self, template: str, *args: Any) -> StatementResult:
        """Compile and execute a template.

        Args:
            template: SQL template with placeholder tokens or ``:name`` markers
            *args: One argument per token, or a single ``{":name": value}`` mapping

        Returns:
            The statement result
        """
        self._last_result = None
        return self.run(self.compile(template, *args))

    def execute(self, template: str, *args: Any) -> int:
        """Execute a template and return the number of affected rows."""
        return self.query(template, *args).rows_affected

    def select(self, template: str, *args: Any) -> "list[dict[str, Any]]":
        """Execute a template and return every row as a dict."""
        return self.query(template, *args).all()

    def select_one(self, template: str, *args: Any) -> "dict[str, Any] | None":
        """Execute a template and return the first row, or None."""
        return self.query(template, *args).one()

    def select_value(self, template: str, *args: Any) -> Any:
        """Execute a template and return the first column of the first row, or None."""
        return self.query(template, *args).scalar()

    def select_column(self, template: str, *args: Any) -> "list[Any]":
        """Execute a template and return the first column of every row."""
        return self.query(template, *args).column()

    def select_key_value(self, template: str, *args: Any) -> "dict[Any, Any]":
        """Execute a template and map the first column of each row to the second."""
        return self.query(template, *args).key_value()

    def insert(self, table: str, rows: "InsertRows", columns: "Sequence[str] | None" = None) -> int:
        """Insert one or many rows and return the number of affected rows.

        Examples:
            driver.insert("users", [{"name": "a", "age": 1}, {"name": "b", "age": 2}])
            driver.insert("users", [["a", 1], ["b", 2]], columns=["name", "age"])
            driver.insert("users", ["a", 1], columns=["name", "age"])
        """
        return self.run(self.build_insert(INSERT_VERB, table, rows, columns)).rows_affected

    def insert_ignore(self, table: str, rows: "InsertRows", columns: "Sequence[str] | None" = None) -> int:
        """Insert rows, skipping rows that violate unique constraints."""
        verb = self.statement_config.insert_ignore_verb
        return self.run(self.build_insert(verb, table, rows, columns)).rows_affected

    def replace(self, table: str, rows: "InsertRows", columns: "Sequence[str] | None" = None) -> int:
        """Insert rows, replacing rows that share a unique key."""
        return self.run(self.build_insert(REPLACE_VERB, table, rows, columns)).rows_affected

    def lock(self, tables: "str | Iterable[str]") -> bool:
        """Take write locks on the given tables.

        Raises:
            StatementError: If the database has no table locks, or locking fails in strict mode.

        Returns:
            True when the lock statement ran, False when a failure was logged instead.
        """
        if not self.statement_config.supports_table_locks:
            msg = f"{type(self).__name__} does not support table locks"
            raise StatementError(msg)
        return self._execute_unbound(build_lock_statement(tables))

    def unlock(self) -> bool:
        """Release all table locks held by this connection."""
        if not self.statement_config.supports_table_locks:
            msg = f"{type(self).__name__} does not support table locks"
            raise StatementError(msg)
        return self._execute_unbound("UNLOCK TABLES")

    def _execute_unbound(self, sql: str) -> bool:
        try:
            with self.handle_database_exceptions(sql):
                self.prepare_statement(sql).execute()
        except StatementError as exc:
            if self.statement_config.strict:
                raise
            logger.warning("Statement failed: %s", exc.detail)
            return False
        return True

    def get_affected_row_count(self) -> "int | None":
        """Rows affected by the last statement run through this driver, or None."""
        if self._last_result is None:
            return None
        return self._last_result.rows_affected

    def close(self) -> None:
        """Close the underlying connection."""
        with wrap_exceptions():
            self.connection.close()
