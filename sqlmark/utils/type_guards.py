"""Type guard functions for runtime type checking in sqlmark.

These guards decide how template arguments and insert rows are shaped, since
``str`` and ``bytes`` are sequences that must still bind as single values.
"""

from collections.abc import Mapping, Sequence, Set
from typing import Any

from typing_extensions import TypeGuard

__all__ = ("is_mapping_argument", "is_named_parameter_mapping", "is_sequence_argument")

_SCALAR_SEQUENCE_TYPES = (str, bytes, bytearray, memoryview)


def is_mapping_argument(obj: Any) -> "TypeGuard[Mapping[Any, Any]]":
    """Check if an argument is a mapping.

    Args:
        obj: The argument to check

    Returns:
        True if the argument is a mapping, False otherwise
    """
    return isinstance(obj, Mapping)


def is_sequence_argument(obj: Any) -> "TypeGuard[Sequence[Any] | Set[Any]]":
    """Check if an argument expands into several values.

    Strings and byte strings are treated as scalars.

    Args:
        obj: The argument to check

    Returns:
        True for lists, tuples, sets and other non-string sequences
    """
    if isinstance(obj, _SCALAR_SEQUENCE_TYPES):
        return False
    return isinstance(obj, (Sequence, Set))


def is_named_parameter_mapping(obj: Any) -> "TypeGuard[Mapping[str, Any]]":
    """Check if an argument is a mapping keyed by ``:name`` markers.

    Only the first key is inspected.

    Args:
        obj: The argument to check

    Returns:
        True if the first key of the mapping starts with ``:``
    """
    if not isinstance(obj, Mapping) or not obj:
        return False
    first_key = next(iter(obj))
    return isinstance(first_key, str) and first_key.startswith(":")
