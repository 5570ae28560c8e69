"""Core template compilation, binding and result types."""

from sqlmark.core.compiler import (
    PLACEHOLDER_REGEX,
    CompiledStatement,
    PlaceholderKind,
    PlaceholderToken,
    TemplateCompiler,
    TemplateMode,
    compile_template,
    has_placeholder_tokens,
    tokenize_template,
)
from sqlmark.core.parameters import (
    DEFAULT_BIND_TYPE_COERCIONS,
    BindEntry,
    BindingQueue,
    BindType,
    coerce_bind_value,
    infer_bind_type,
)
from sqlmark.core.result import StatementResult
from sqlmark.core.statement import OperationType, StatementConfig, detect_operation_type

__all__ = (
    "DEFAULT_BIND_TYPE_COERCIONS",
    "PLACEHOLDER_REGEX",
    "BindEntry",
    "BindType",
    "BindingQueue",
    "CompiledStatement",
    "OperationType",
    "PlaceholderKind",
    "PlaceholderToken",
    "StatementConfig",
    "StatementResult",
    "TemplateCompiler",
    "TemplateMode",
    "coerce_bind_value",
    "compile_template",
    "detect_operation_type",
    "has_placeholder_tokens",
    "infer_bind_type",
    "tokenize_template",
)
