"""Typed placeholder templates compiled into prepared statements."""

from sqlmark import adapters, core, driver, exceptions, utils
from sqlmark.__metadata__ import __version__
from sqlmark.config import DatabaseConfigProtocol, NoPoolSyncConfig
from sqlmark.core import (
    BindEntry,
    BindingQueue,
    BindType,
    CompiledStatement,
    PlaceholderKind,
    PlaceholderToken,
    StatementConfig,
    StatementResult,
    TemplateCompiler,
    compile_template,
    infer_bind_type,
    tokenize_template,
)
from sqlmark.driver import PreparedStatement, SyncDriverAdapterBase
from sqlmark.utils.text import sanitize_identifier, strip_tags

__all__ = (
    "BindEntry",
    "BindType",
    "BindingQueue",
    "CompiledStatement",
    "DatabaseConfigProtocol",
    "NoPoolSyncConfig",
    "PlaceholderKind",
    "PlaceholderToken",
    "PreparedStatement",
    "StatementConfig",
    "StatementResult",
    "SyncDriverAdapterBase",
    "TemplateCompiler",
    "__version__",
    "adapters",
    "compile_template",
    "core",
    "driver",
    "exceptions",
    "infer_bind_type",
    "sanitize_identifier",
    "strip_tags",
    "tokenize_template",
    "utils",
)
