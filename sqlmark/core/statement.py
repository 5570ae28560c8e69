"""Statement configuration and operation type detection."""

from collections.abc import Callable, Mapping
from typing import Any, Final, Literal

import sqlglot
from mypy_extensions import mypyc_attr
from sqlglot import expressions as exp
from sqlglot.errors import SqlglotError

from sqlmark.core.parameters import DEFAULT_BIND_TYPE_COERCIONS, BindType
from sqlmark.utils.logging import get_logger

__all__ = ("DEFAULT_TEMPLATE_CACHE_SIZE", "OperationType", "StatementConfig", "detect_operation_type")

logger = get_logger("core.statement")

OperationType = Literal["SELECT", "INSERT", "UPDATE", "DELETE", "DDL", "EXECUTE", "UNKNOWN"]

DEFAULT_TEMPLATE_CACHE_SIZE: Final = 1000

_KEYWORD_OPERATIONS: "Final[dict[str, OperationType]]" = {
    "SELECT": "SELECT",
    "WITH": "SELECT",
    "SHOW": "SELECT",
    "INSERT": "INSERT",
    "REPLACE": "INSERT",
    "UPDATE": "UPDATE",
    "DELETE": "DELETE",
    "CREATE": "DDL",
    "DROP": "DDL",
    "ALTER": "DDL",
    "TRUNCATE": "DDL",
}


@mypyc_attr(allow_interpreted_subclasses=False)
class StatementConfig:
    """Per-driver configuration for compiling and executing statements.

    Attributes:
        dialect: sqlglot dialect name used for operation type detection
        strict: Raise ``StatementError`` when prepare or execute fails. When False
            the failure is logged and an empty result is returned.
        enable_parsing: Detect the operation type by parsing the compiled SQL
        bind_type_coercions: Converters applied to values for each bind type
        insert_ignore_verb: Statement prefix used by ``insert_ignore``
        supports_table_locks: Whether ``LOCK TABLES`` is available
        template_cache_size: Number of tokenized templates kept by the compiler
    """

    __slots__ = (
        "bind_type_coercions",
        "dialect",
        "enable_parsing",
        "insert_ignore_verb",
        "strict",
        "supports_table_locks",
        "template_cache_size",
    )

    def __init__(
        self,
        dialect: "str | None" = "mysql",
        strict: bool = True,
        enable_parsing: bool = True,
        bind_type_coercions: "Mapping[BindType, Callable[[Any], Any]] | None" = None,
        insert_ignore_verb: str = "INSERT IGNORE",
        supports_table_locks: bool = True,
        template_cache_size: int = DEFAULT_TEMPLATE_CACHE_SIZE,
    ) -> None:
        self.dialect = dialect
        self.strict = strict
        self.enable_parsing = enable_parsing
        self.bind_type_coercions: dict[BindType, Callable[[Any], Any]] = {
            **DEFAULT_BIND_TYPE_COERCIONS,
            **(bind_type_coercions or {}),
        }
        self.insert_ignore_verb = insert_ignore_verb
        self.supports_table_locks = supports_table_locks
        self.template_cache_size = template_cache_size

    def replace(self, **kwargs: Any) -> "StatementConfig":
        """Return a copy of this config with the given attributes changed.

        Raises:
            TypeError: If an unknown attribute name is passed.
        """
        unknown = set(kwargs) - set(self.__slots__)
        if unknown:
            msg = f"Unknown StatementConfig attributes: {', '.join(sorted(unknown))}"
            raise TypeError(msg)
        current = {name: getattr(self, name) for name in self.__slots__}
        current.update(kwargs)
        return StatementConfig(**current)

    def __repr__(self) -> str:
        return (
            f"StatementConfig(dialect={self.dialect!r}, strict={self.strict!r}, "
            f"enable_parsing={self.enable_parsing!r}, insert_ignore_verb={self.insert_ignore_verb!r}, "
            f"supports_table_locks={self.supports_table_locks!r})"
        )


def _operation_from_keyword(sql: str) -> OperationType:
    words = sql.lstrip(" \t\r\n(").split(None, 1)
    if not words:
        return "UNKNOWN"
    return _KEYWORD_OPERATIONS.get(words[0].upper(), "EXECUTE")


def _operation_from_expression(expression: "exp.Expression") -> OperationType:
    if isinstance(expression, (exp.Select, exp.Union, exp.Show)):
        return "SELECT"
    if isinstance(expression, exp.Insert):
        return "INSERT"
    if isinstance(expression, exp.Update):
        return "UPDATE"
    if isinstance(expression, exp.Delete):
        return "DELETE"
    if isinstance(expression, (exp.Create, exp.Drop, exp.Alter)):
        return "DDL"
    return "UNKNOWN"


def detect_operation_type(sql: str, dialect: "str | None" = None, enable_parsing: bool = True) -> OperationType:
    """Detect the operation a compiled statement performs.

    The statement is parsed with sqlglot; when parsing is disabled or fails the
    leading keyword decides.

    Args:
        sql: Compiled SQL with driver-native placeholders
        dialect: sqlglot dialect name
        enable_parsing: Parse the statement instead of reading the first keyword

    Returns:
        Operation type string
    """
    if not enable_parsing:
        return _operation_from_keyword(sql)
    try:
        expression = sqlglot.parse_one(sql, dialect=dialect)
    except (SqlglotError, ValueError):
        logger.debug("Could not parse statement for operation detection, using keyword fallback")
        return _operation_from_keyword(sql)
    operation = _operation_from_expression(expression)
    if operation == "UNKNOWN":
        return _operation_from_keyword(sql)
    return operation
