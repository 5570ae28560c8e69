from collections.abc import Mapping, Sequence
from typing import Any, Union

from typing_extensions import TypeAlias

__all__ = ("InsertRows", "RowData")

RowData: TypeAlias = Union[Mapping[str, Any], Sequence[Any]]
"""One row of values for an insert: a column mapping or a plain sequence."""

InsertRows: TypeAlias = Union[RowData, Sequence[RowData]]
"""A single insert row or a sequence of rows."""
