"""Bind entries, the binding queue and type inference.

Components:
- BindType enum: Type tags attached to bound values
- BindEntry: One pending ``(value, bind_type, name)`` binding
- BindingQueue: Ordered, drain-once collection of bind entries
- infer_bind_type: Runtime type inference for untyped placeholders
- coerce_bind_value: Per-type value coercion applied when binding
"""

from collections import deque
from collections.abc import Callable, Iterable, Iterator, Mapping
from enum import Enum
from functools import singledispatch
from typing import Any, Final

from mypy_extensions import mypyc_attr

from sqlmark.exceptions import ParameterError

__all__ = (
    "DEFAULT_BIND_TYPE_COERCIONS",
    "BindEntry",
    "BindType",
    "BindingQueue",
    "coerce_bind_value",
    "infer_bind_type",
)


class BindType(str, Enum):
    """Type tag used when binding a value to a prepared statement."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"

    def __str__(self) -> str:
        return self.value


@singledispatch
def infer_bind_type(value: Any) -> BindType:
    """Infer the bind type of a value that has no explicit type annotation.

    Checks run integer, boolean, null, then string. ``bool`` is registered on
    its own so booleans never fall into the integer branch.

    Args:
        value: Runtime value

    Returns:
        The inferred bind type
    """
    return BindType.STRING


@infer_bind_type.register
def _(value: int) -> BindType:
    return BindType.INTEGER


@infer_bind_type.register
def _(value: bool) -> BindType:
    return BindType.BOOLEAN


@infer_bind_type.register(type(None))
def _(value: None) -> BindType:
    return BindType.NULL


def _to_integer(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    return int(value)


def _to_string(value: Any) -> Any:
    if isinstance(value, (str, bytes, bytearray)):
        return value
    return str(value)


def _to_null(value: Any) -> None:
    return None


DEFAULT_BIND_TYPE_COERCIONS: "Final[Mapping[BindType, Callable[[Any], Any]]]" = {
    BindType.STRING: _to_string,
    BindType.INTEGER: _to_integer,
    BindType.BOOLEAN: bool,
    BindType.NULL: _to_null,
}


def coerce_bind_value(
    value: Any, bind_type: BindType, coercions: "Mapping[BindType, Callable[[Any], Any]] | None" = None
) -> Any:
    """Coerce a value to the representation expected for its bind type.

    ``None`` is passed through for every type so NULL can be bound in any slot.

    Args:
        value: Value to bind
        bind_type: Type tag of the binding
        coercions: Per-type converters, defaults to DEFAULT_BIND_TYPE_COERCIONS

    Raises:
        ParameterError: If the value cannot be converted.

    Returns:
        The converted value
    """
    if value is None:
        return None
    converter = (coercions or DEFAULT_BIND_TYPE_COERCIONS).get(bind_type)
    if converter is None:
        return value
    try:
        return converter(value)
    except (TypeError, ValueError) as exc:
        msg = f"Cannot bind {value!r} as {bind_type}"
        raise ParameterError(msg) from exc


@mypyc_attr(allow_interpreted_subclasses=False)
class BindEntry:
    """A value waiting to be bound to a prepared statement.

    Attributes:
        value: The raw value
        bind_type: Type tag used when binding
        name: Named marker (``:name``) in named mode, otherwise None
    """

    __slots__ = ("bind_type", "name", "value")

    def __init__(self, value: Any, bind_type: BindType, name: "str | None" = None) -> None:
        self.value = value
        self.bind_type = bind_type
        self.name = name

    def __iter__(self) -> "Iterator[Any]":
        return iter((self.value, self.bind_type, self.name))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BindEntry):
            return self.value == other.value and self.bind_type == other.bind_type and self.name == other.name
        if isinstance(other, tuple):
            return tuple(self) == other or (self.name is None and (self.value, self.bind_type) == other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((repr(self.value), self.bind_type, self.name))

    def __repr__(self) -> str:
        name_part = f", name={self.name!r}" if self.name is not None else ""
        return f"BindEntry({self.value!r}, {self.bind_type.name}{name_part})"


@mypyc_attr(allow_interpreted_subclasses=False)
class BindingQueue:
    """Ordered queue of bind entries for exactly one pending statement.

    Entries are appended while a template is compiled and removed by
    :meth:`drain`, which yields them in insertion order and leaves the queue
    empty.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: "Iterable[BindEntry] | None" = None) -> None:
        self._entries: deque[BindEntry] = deque(entries or ())

    def enqueue(self, value: Any, bind_type: BindType, name: "str | None" = None) -> BindEntry:
        entry = BindEntry(value, bind_type, name)
        self._entries.append(entry)
        return entry

    def enqueue_string(self, value: Any) -> BindEntry:
        return self.enqueue(value, BindType.STRING)

    def enqueue_integer(self, value: Any) -> BindEntry:
        return self.enqueue(value, BindType.INTEGER)

    def enqueue_boolean(self, value: Any) -> BindEntry:
        return self.enqueue(value, BindType.BOOLEAN)

    def enqueue_null(self, value: Any) -> BindEntry:
        return self.enqueue(value, BindType.NULL)

    def enqueue_inferred(self, value: Any, name: "str | None" = None) -> BindEntry:
        return self.enqueue(value, infer_bind_type(value), name)

    def enqueue_named(self, parameters: "Mapping[str, Any]") -> None:
        """Enqueue one inferred entry per named marker."""
        for name, value in parameters.items():
            self.enqueue_inferred(value, name)

    def drain(self) -> "Iterator[tuple[int, BindEntry]]":
        """Remove and yield entries with their 1-based position."""
        position = 1
        while self._entries:
            yield position, self._entries.popleft()
            position += 1

    @property
    def entries(self) -> "tuple[BindEntry, ...]":
        return tuple(self._entries)

    @property
    def is_named(self) -> bool:
        return any(entry.name is not None for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> "Iterator[BindEntry]":
        return iter(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"BindingQueue({list(self._entries)!r})"
