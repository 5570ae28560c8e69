import sqlite3

from typing_extensions import TypeAlias

__all__ = ("SqliteConnection",)

SqliteConnection: TypeAlias = sqlite3.Connection
