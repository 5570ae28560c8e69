"""Text helpers for SQL identifiers and string values."""

import re
from typing import Any

__all__ = ("sanitize_identifier", "strip_tags")

# Characters allowed in identifiers written into SQL text.
_IDENTIFIER_DISALLOWED_RE = re.compile(r"[^a-z0-9_\-.`]", re.IGNORECASE)

_HTML_COMMENT_RE = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)
_HTML_TAG_RE = re.compile(r"</?[a-z!?/][^>]*(?:>|$)", re.IGNORECASE | re.DOTALL)


def sanitize_identifier(identifier: Any) -> str:
    """Remove every character that is not allowed in a column or table identifier.

    Letters, digits, underscore, hyphen, dot and backtick are kept verbatim.

    Args:
        identifier: Identifier supplied by the caller. Non-strings are converted with ``str()``.

    Returns:
        The sanitized identifier.
    """
    return _IDENTIFIER_DISALLOWED_RE.sub("", str(identifier))


def strip_tags(value: Any) -> Any:
    """Strip HTML and XML tags and comments from a value.

    Args:
        value: Value to clean. ``None`` is returned unchanged.

    Returns:
        The value as a string without markup.
    """
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    text = _HTML_COMMENT_RE.sub("", text)
    return _HTML_TAG_RE.sub("", text)
