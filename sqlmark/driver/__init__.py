"""Driver base classes."""

from sqlmark.driver._common import (
    CommonDriverAttributesMixin,
    build_insert_statement,
    build_lock_statement,
    normalize_insert_rows,
)
from sqlmark.driver._prepared import PreparedStatement
from sqlmark.driver._sync import SyncDriverAdapterBase

__all__ = (
    "CommonDriverAttributesMixin",
    "PreparedStatement",
    "SyncDriverAdapterBase",
    "build_insert_statement",
    "build_lock_statement",
    "normalize_insert_rows",
)
