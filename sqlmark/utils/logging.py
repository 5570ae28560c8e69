"""Logging helpers for sqlmark.

Loggers from :func:`get_logger` sit under the ``sqlmark`` namespace and tag
their records with the active correlation id. Drivers attach statement fields
such as the SQL text, bind count and timing through :func:`log_with_context`,
and :class:`StructuredFormatter` writes them out as one JSON object per line.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from sqlmark.utils.serializers import to_json

if TYPE_CHECKING:
    from collections.abc import Iterable
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlmark"
FIELDS_ATTRIBUTE = "extra_fields"

correlation_id_var: ContextVar[str | None] = ContextVar("sqlmark_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag every record logged from the current context with ``correlation_id``."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class CorrelationIDFilter(logging.Filter):
    """Copy the active correlation id onto records, when one is set."""

    def filter(self, record: LogRecord) -> bool:
        correlation_id = correlation_id_var.get()
        if correlation_id is not None:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """Format records as single-line JSON.

    The payload carries the level, logger name, message and source location,
    the correlation id when one is active, any fields attached with
    :func:`log_with_context`, and the formatted traceback for exceptions.
    """

    def format(self, record: LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        correlation_id = getattr(record, "correlation_id", None) or correlation_id_var.get()
        if correlation_id is not None:
            payload["correlation_id"] = correlation_id
        payload.update(getattr(record, FIELDS_ATTRIBUTE, None) or {})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return to_json(payload)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``sqlmark`` namespace.

    ``get_logger("driver")`` and ``get_logger("sqlmark.driver")`` name the same
    logger. Without a name the package root logger is returned.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(existing, CorrelationIDFilter) for existing in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: int | str = logging.INFO, *, structured: bool = True, handlers: Iterable[logging.Handler] = ()
) -> logging.Logger:
    """Route the package's logs to stdout, replacing previously installed handlers.

    Records stop propagating to the root logger, so an application's own
    logging setup does not print them a second time.

    Args:
        level: Level name or number for the ``sqlmark`` logger.
        structured: Write JSON lines when True, plain text otherwise.
        handlers: Extra handlers attached next to the stdout handler, unchanged.

    Returns:
        The configured ``sqlmark`` logger.
    """
    root_logger = get_logger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(
        StructuredFormatter() if structured else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root_logger.handlers[:] = [stdout_handler, *handlers]
    root_logger.propagate = False
    return root_logger


def log_with_context(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log ``message`` with ``fields`` attached for :class:`StructuredFormatter`.

    The message is logged as-is, so SQL text containing ``%`` is safe to pass.
    The record points at the caller's source location.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={FIELDS_ATTRIBUTE: fields}, stacklevel=2)
