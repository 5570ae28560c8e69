"""Runtime-checkable protocols for the DB-API objects sqlmark drives."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

__all__ = ("DBAPIConnectionProtocol", "DBAPICursorProtocol")


@runtime_checkable
class DBAPICursorProtocol(Protocol):
    """The subset of a DB-API 2.0 cursor used by prepared statements."""

    description: "Sequence[Sequence[Any]] | None"
    rowcount: int

    def execute(self, operation: Any, parameters: Any = ...) -> Any:
        """Execute a statement."""
        ...

    def fetchall(self) -> "Sequence[Sequence[Any]]":
        """Fetch all remaining rows."""
        ...

    def close(self) -> Any:
        """Close the cursor."""
        ...


@runtime_checkable
class DBAPIConnectionProtocol(Protocol):
    """The subset of a DB-API 2.0 connection used by drivers."""

    def cursor(self) -> Any:
        """Open a cursor."""
        ...

    def commit(self) -> Any:
        """Commit the current transaction."""
        ...

    def rollback(self) -> Any:
        """Roll back the current transaction."""
        ...

    def close(self) -> Any:
        """Close the connection."""
        ...
