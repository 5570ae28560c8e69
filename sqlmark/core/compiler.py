"""Placeholder template compilation.

Templates mix SQL with typed placeholder tokens. Compilation splits the
template into literal and token segments, consumes one argument per token,
rewrites every token into zero or more driver-native ``?`` placeholders and
fills a :class:`~sqlmark.core.parameters.BindingQueue` in the same order.

Token grammar (case-insensitive)::

    ?[asifhjwrqbn|]?[0-9]*

The trailing digits are accepted and ignored, so ``?s1`` and ``?s2`` both
mean a string placeholder.

Templates without tokens but with a mapping argument keyed by ``:name``
markers are compiled in named mode: the SQL is kept as-is and each mapping
item is queued under its marker name.
"""

import re
from collections import OrderedDict
from collections.abc import Callable
from enum import Enum
from typing import Any, Final, Literal

from mypy_extensions import mypyc_attr

from sqlmark.core.parameters import BindingQueue
from sqlmark.core.statement import OperationType, StatementConfig, detect_operation_type
from sqlmark.exceptions import (
    ExtraParameterError,
    MalformedTemplateError,
    MissingParameterError,
    ParameterError,
    ParameterStyleMismatchError,
)
from sqlmark.utils.logging import get_logger
from sqlmark.utils.text import sanitize_identifier, strip_tags
from sqlmark.utils.type_guards import is_mapping_argument, is_named_parameter_mapping, is_sequence_argument

__all__ = (
    "PLACEHOLDER_REGEX",
    "CompiledStatement",
    "PlaceholderKind",
    "PlaceholderToken",
    "TemplateCompiler",
    "TemplateMode",
    "compile_template",
    "has_placeholder_tokens",
    "tokenize_template",
)

logger = get_logger("core.compiler")

PLACEHOLDER_REGEX: Final = re.compile(r"(\?[asifhjwrqbn|]?)[0-9]*", re.IGNORECASE)

NATIVE_PLACEHOLDER: Final = "?"

TemplateMode = Literal["template", "named", "static"]


class PlaceholderKind(str, Enum):
    """Placeholder token kinds, valued by their kind letter."""

    DEFAULT = ""
    STRING = "s"
    FLOAT = "f"
    INTEGER = "i"
    BOOLEAN = "b"
    NULL = "n"
    RAW = "r"
    STRIPPED_STRING = "q"
    INT_ARRAY = "a"
    STRING_ARRAY = "j"
    COLUMN_MAP_COMMA = "h"
    COLUMN_MAP_AND = "w"

    @classmethod
    def from_letter(cls, letter: str) -> "PlaceholderKind | None":
        try:
            return cls(letter.lower())
        except ValueError:
            return None


@mypyc_attr(allow_interpreted_subclasses=False)
class PlaceholderToken:
    """A placeholder token found in a template.

    Attributes:
        kind: Token kind, or None when the kind letter is not recognized
        text: Matched text including any numeric suffix
        position: Character offset in the template
        ordinal: Order of appearance (0-indexed); also the index of the consumed argument
    """

    __slots__ = ("kind", "ordinal", "position", "text")

    def __init__(self, kind: "PlaceholderKind | None", text: str, position: int, ordinal: int) -> None:
        self.kind = kind
        self.text = text
        self.position = position
        self.ordinal = ordinal

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlaceholderToken):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.text == other.text
            and self.position == other.position
            and self.ordinal == other.ordinal
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.text, self.position, self.ordinal))

    def __repr__(self) -> str:
        kind = self.kind.name if self.kind is not None else None
        return f"PlaceholderToken(kind={kind}, text={self.text!r}, position={self.position}, ordinal={self.ordinal})"


Segment = str | PlaceholderToken


def tokenize_template(template: str) -> "list[Segment]":
    """Split a template into literal strings and placeholder tokens.

    Literal segments are kept even when empty, so literals and tokens
    alternate starting and ending with a literal.

    Args:
        template: SQL template

    Returns:
        Alternating literal and token segments
    """
    segments: list[Segment] = []
    last_end = 0
    for ordinal, match in enumerate(PLACEHOLDER_REGEX.finditer(template)):
        segments.append(template[last_end : match.start()])
        segments.append(
            PlaceholderToken(
                kind=PlaceholderKind.from_letter(match.group(1)[1:]),
                text=match.group(0),
                position=match.start(),
                ordinal=ordinal,
            )
        )
        last_end = match.end()
    segments.append(template[last_end:])
    return segments


def has_placeholder_tokens(template: str) -> bool:
    """Check whether a template contains at least one placeholder token."""
    return PLACEHOLDER_REGEX.search(template) is not None


@mypyc_attr(allow_interpreted_subclasses=False)
class CompiledStatement:
    """Rewritten SQL plus the bind entries it needs, ready for preparation.

    Attributes:
        sql: SQL containing only driver-native placeholders
        queue: Bind entries in placeholder order
        mode: How the template was compiled
        operation_type: Detected operation (SELECT, INSERT, ...)
        template: The original template
    """

    __slots__ = ("mode", "operation_type", "queue", "sql", "template")

    def __init__(
        self,
        sql: str,
        queue: BindingQueue,
        mode: TemplateMode = "template",
        operation_type: OperationType = "UNKNOWN",
        template: "str | None" = None,
    ) -> None:
        self.sql = sql
        self.queue = queue
        self.mode = mode
        self.operation_type = operation_type
        self.template = template if template is not None else sql

    @property
    def returns_rows(self) -> bool:
        return self.operation_type == "SELECT"

    def __repr__(self) -> str:
        return (
            f"CompiledStatement(sql={self.sql!r}, queue={self.queue!r}, "
            f"mode={self.mode!r}, operation_type={self.operation_type!r})"
        )


def _fill(count: int) -> str:
    return ",".join(NATIVE_PLACEHOLDER for _ in range(count))


def _rewrite_array(value: Any, enqueue: "Callable[[Any], Any]") -> str:
    if not is_sequence_argument(value):
        enqueue(value)
        return NATIVE_PLACEHOLDER
    values = list(value)
    for item in values:
        enqueue(item)
    return _fill(len(values))


def _rewrite_column_map(value: Any, queue: BindingQueue, separator: str, template: str) -> str:
    if is_mapping_argument(value):
        columns = []
        for column, column_value in value.items():
            columns.append(f"{sanitize_identifier(column)} = {NATIVE_PLACEHOLDER}")
            queue.enqueue_string(column_value)
        return separator.join(columns)
    if is_sequence_argument(value):
        msg = f"Column map placeholder expects a mapping of column names to values, got {type(value).__name__}"
        raise ParameterError(msg, template)
    queue.enqueue_string(value)
    return NATIVE_PLACEHOLDER


def _rewrite_token(token: PlaceholderToken, value: Any, queue: BindingQueue, template: str) -> str:
    """Rewrite one token into driver SQL, enqueueing the entries it binds."""
    kind = token.kind
    if kind is PlaceholderKind.DEFAULT:
        queue.enqueue_inferred(value)
        return NATIVE_PLACEHOLDER
    if kind is PlaceholderKind.STRIPPED_STRING:
        queue.enqueue_string(strip_tags(value))
        return NATIVE_PLACEHOLDER
    if kind in {PlaceholderKind.STRING, PlaceholderKind.FLOAT}:
        # the driver layer has no float type; floats travel as strings
        queue.enqueue_string(value)
        return NATIVE_PLACEHOLDER
    if kind is PlaceholderKind.INTEGER:
        queue.enqueue_integer(value)
        return NATIVE_PLACEHOLDER
    if kind is PlaceholderKind.BOOLEAN:
        queue.enqueue_boolean(value)
        return NATIVE_PLACEHOLDER
    if kind is PlaceholderKind.NULL:
        queue.enqueue_null(value)
        return NATIVE_PLACEHOLDER
    if kind is PlaceholderKind.RAW:
        return "" if value is None else str(value)
    if kind is PlaceholderKind.INT_ARRAY:
        return _rewrite_array(value, queue.enqueue_integer)
    if kind is PlaceholderKind.STRING_ARRAY:
        return _rewrite_array(value, queue.enqueue_string)
    if kind is PlaceholderKind.COLUMN_MAP_COMMA:
        return _rewrite_column_map(value, queue, ", ", template)
    if kind is PlaceholderKind.COLUMN_MAP_AND:
        return _rewrite_column_map(value, queue, " AND ", template)
    msg = f"Unknown placeholder token {token.text!r} at position {token.position}"
    raise MalformedTemplateError(msg, template)


@mypyc_attr(allow_interpreted_subclasses=False)
class TemplateCompiler:
    """Compiles placeholder templates into driver SQL and bind entries.

    Tokenized templates are kept in a bounded LRU cache, so compiling the same
    template repeatedly only re-runs the rewrite step.
    """

    __slots__ = ("_cache", "_cache_hits", "_cache_misses", "_config")

    def __init__(self, config: "StatementConfig | None" = None) -> None:
        self._config = config or StatementConfig()
        self._cache: OrderedDict[str, tuple[Segment, ...]] = OrderedDict()
        self._cache_hits = 0
        self._cache_misses = 0

    @property
    def config(self) -> StatementConfig:
        return self._config

    def tokenize(self, template: str) -> "tuple[Segment, ...]":
        """Tokenize a template, using the LRU cache when enabled."""
        max_size = self._config.template_cache_size
        if max_size <= 0:
            return tuple(tokenize_template(template))

        cached = self._cache.get(template)
        if cached is not None:
            self._cache.move_to_end(template)
            self._cache_hits += 1
            return cached

        self._cache_misses += 1
        segments = tuple(tokenize_template(template))
        if len(self._cache) >= max_size:
            self._cache.popitem(last=False)
        self._cache[template] = segments
        return segments

    def compile(self, template: str, *args: Any) -> CompiledStatement:
        """Compile a template with its arguments.

        Args:
            template: SQL template
            *args: One argument per placeholder token, or a single ``{":name": value}``
                mapping for named mode

        Raises:
            MalformedTemplateError: If a token has an unknown kind letter.
            MissingParameterError: If there are fewer arguments than tokens.
            ExtraParameterError: If there are more arguments than tokens.
            ParameterStyleMismatchError: If arguments are passed to a template with
                neither tokens nor named markers.

        Returns:
            The compiled statement
        """
        queue = BindingQueue()
        if not args:
            return self._finish(template, template, queue, "static")

        segments = self.tokenize(template)
        tokens = [segment for segment in segments if isinstance(segment, PlaceholderToken)]
        if not tokens:
            parameters = args[0]
            if len(args) > 1 or not is_named_parameter_mapping(parameters):
                raise ParameterStyleMismatchError(sql=template)
            queue.enqueue_named(parameters)
            return self._finish(template, template, queue, "named")

        if len(args) < len(tokens):
            msg = f"Template has {len(tokens)} placeholder tokens but only {len(args)} arguments were given"
            raise MissingParameterError(msg, template)
        if len(args) > len(tokens):
            msg = f"Template has {len(tokens)} placeholder tokens but {len(args)} arguments were given"
            raise ExtraParameterError(msg, template)

        parts = [
            segment if isinstance(segment, str) else _rewrite_token(segment, args[segment.ordinal], queue, template)
            for segment in segments
        ]
        return self._finish(template, "".join(parts), queue, "template")

    def from_queue(self, sql: str, queue: BindingQueue) -> CompiledStatement:
        """Wrap SQL that was built together with its binding queue, such as multi-row inserts."""
        return self._finish(sql, sql, queue, "template")

    def _finish(self, template: str, sql: str, queue: BindingQueue, mode: TemplateMode) -> CompiledStatement:
        operation_type = detect_operation_type(sql, self._config.dialect, self._config.enable_parsing)
        logger.debug("Compiled %s template with %d bind entries (%s)", mode, len(queue), operation_type)
        return CompiledStatement(sql=sql, queue=queue, mode=mode, operation_type=operation_type, template=template)

    def clear_cache(self) -> None:
        self._cache.clear()
        self._cache_hits = 0
        self._cache_misses = 0

    def cache_info(self) -> "dict[str, int]":
        return {
            "size": len(self._cache),
            "max_size": self._config.template_cache_size,
            "hits": self._cache_hits,
            "misses": self._cache_misses,
        }


_default_compiler: "TemplateCompiler | None" = None


def compile_template(template: str, *args: Any, config: "StatementConfig | None" = None) -> CompiledStatement:
    """Compile a template with a compiler for ``config`` (or a shared default one).

    See :meth:`TemplateCompiler.compile`.
    """
    global _default_compiler  # noqa: PLW0603
    if config is not None:
        return TemplateCompiler(config).compile(template, *args)
    if _default_compiler is None:
        _default_compiler = TemplateCompiler()
    return _default_compiler.compile(template, *args)

