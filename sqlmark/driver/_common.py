"""Shared driver state and statement builders."""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Final

from sqlmark.core.compiler import CompiledStatement, TemplateCompiler
from sqlmark.core.parameters import BindingQueue
from sqlmark.core.statement import StatementConfig
from sqlmark.exceptions import ImproperConfigurationError, ParameterError
from sqlmark.protocols import DBAPIConnectionProtocol
from sqlmark.utils.text import sanitize_identifier
from sqlmark.utils.type_guards import is_mapping_argument, is_sequence_argument

if TYPE_CHECKING:
    from sqlmark.core.result import StatementResult
    from sqlmark.typing import InsertRows, RowData

__all__ = ("CommonDriverAttributesMixin", "build_insert_statement", "build_lock_statement", "normalize_insert_rows")

INSERT_VERB: Final = "INSERT"
REPLACE_VERB: Final = "REPLACE"


def normalize_insert_rows(rows: "InsertRows") -> "list[RowData]":
    """Turn a single row or a sequence of rows into a list of rows.

    A mapping, or a sequence whose first item is a plain value, is a single row.

    Raises:
        ParameterError: If there are no rows, or rows is a scalar.
    """
    if is_mapping_argument(rows):
        return [rows]
    if not is_sequence_argument(rows):
        msg = f"Insert rows must be a mapping or a sequence, got {type(rows).__name__}"
        raise ParameterError(msg)
    row_list = list(rows)
    if not row_list:
        msg = "Insert requires at least one row"
        raise ParameterError(msg)
    first = row_list[0]
    if is_mapping_argument(first) or is_sequence_argument(first):
        return row_list
    return [row_list]


def _resolve_columns(first_row: "RowData", columns: "Sequence[str] | None") -> "list[tuple[Any, str]]":
    """Pair each row key with the sanitized column name written into the SQL."""
    if columns is not None:
        keys = list(columns)
    elif is_mapping_argument(first_row):
        keys = list(first_row)
    else:
        msg = "Column names are required when rows are plain sequences"
        raise ParameterError(msg)
    if not keys:
        msg = "Insert requires at least one column"
        raise ParameterError(msg)
    return [(key, sanitize_identifier(key)) for key in keys]


def _row_values(index: int, row: "RowData", keys: "list[Any]") -> "list[Any]":
    if is_mapping_argument(row):
        if set(row) != set(keys):
            msg = f"Row {index} has keys {sorted(map(str, row))} but columns {sorted(map(str, keys))} were expected"
            raise ParameterError(msg)
        return [row[key] for key in keys]
    if not is_sequence_argument(row):
        msg = f"Row {index} must be a mapping or a sequence, got {type(row).__name__}"
        raise ParameterError(msg)
    values = list(row)
    if len(values) != len(keys):
        msg = f"Row {index} has {len(values)} values but {len(keys)} columns were given"
        raise ParameterError(msg)
    return values


def build_insert_statement(
    verb: str, table: str, rows: "InsertRows", columns: "Sequence[str] | None" = None
) -> "tuple[str, BindingQueue]":
    """Build a fully parameterized multi-row insert statement.

    Every value is queued with an inferred bind type, row by row. Mapping rows
    are read in column order, so their own key order does not matter, but
    every mapping row must have exactly the column keys.

    Args:
        verb: Statement prefix, e.g. ``INSERT``, ``INSERT IGNORE`` or ``REPLACE``
        table: Table name, sanitized before use
        rows: One row or a sequence of rows
        columns: Explicit column names; defaults to the first row's mapping keys

    Raises:
        ParameterError: If the rows cannot be matched with the columns.

    Returns:
        Tuple of (sql, queue)
    """
    row_list = normalize_insert_rows(rows)
    resolved = _resolve_columns(row_list[0], columns)
    keys = [key for key, _ in resolved]
    queue = BindingQueue()
    groups = []
    for index, row in enumerate(row_list):
        values = _row_values(index, row, keys)
        for value in values:
            queue.enqueue_inferred(value)
        groups.append("(" + ",".join("?" for _ in values) + ")")
    table_name = sanitize_identifier(table).strip("`")
    column_list = ",".join(name for _, name in resolved)
    sql = f"{verb} INTO `{table_name}` ({column_list}) VALUES {','.join(groups)}"
    return sql, queue


def build_lock_statement(tables: "str | Iterable[str]") -> str:
    """Build a ``LOCK TABLES`` statement taking a write lock on every table.

    Raises:
        ParameterError: If no table names are given.
    """
    names = [tables] if isinstance(tables, str) else list(tables)
    if not names:
        msg = "Lock requires at least one table"
        raise ParameterError(msg)
    return "LOCK TABLES " + ",".join(f"{sanitize_identifier(name)} WRITE" for name in names)


class CommonDriverAttributesMixin:
    """Connection, configuration and compiler shared by drivers."""

    __slots__ = ("_compiler", "_last_result", "connection", "statement_config")

    dialect: "str | None" = None

    def __init__(
        self,
        connection: Any,
        statement_config: "StatementConfig | None" = None,
    ) -> None:
        if not isinstance(connection, DBAPIConnectionProtocol):
            msg = f"{type(self).__name__} requires a DB-API connection, got {type(connection).__name__}"
            raise ImproperConfigurationError(msg)
        self.connection = connection
        self.statement_config = statement_config or StatementConfig(dialect=self.dialect)
        self._compiler = TemplateCompiler(self.statement_config)
        self._last_result: "StatementResult | None" = None

    @property
    def compiler(self) -> TemplateCompiler:
        return self._compiler

    @property
    def last_result(self) -> "StatementResult | None":
        return self._last_result

    def compile(self, template: str, *args: Any) -> CompiledStatement:
        """Compile a template with this driver's statement configuration."""
        return self._compiler.compile(template, *args)

    def build_insert(
        self, verb: str, table: str, rows: "InsertRows", columns: "Sequence[str] | None" = None
    ) -> CompiledStatement:
        sql, queue = build_insert_statement(verb, table, rows, columns)
        return self._compiler.from_queue(sql, queue)
