"""Database configuration base classes."""

from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from sqlmark.core.statement import StatementConfig
from sqlmark.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlmark.driver import SyncDriverAdapterBase


__all__ = ("DatabaseConfigProtocol", "DriverT", "NoPoolSyncConfig")

ConnectionT = TypeVar("ConnectionT")
DriverT = TypeVar("DriverT", bound="SyncDriverAdapterBase")

logger = get_logger("config")


class DatabaseConfigProtocol(ABC, Generic[ConnectionT, DriverT]):
    """Protocol defining the interface for database configurations."""

    __slots__ = ("connection_config", "statement_config")
    driver_type: "ClassVar[type[Any]]"
    connection_type: "ClassVar[type[Any]]"
    statement_config: StatementConfig

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.connection_config == other.connection_config

    def __repr__(self) -> str:
        safe_config = {key: "***" if key == "password" else value for key, value in self.connection_config.items()}
        return f"{type(self).__name__}(connection_config={safe_config!r}, statement_config={self.statement_config!r})"

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Create and return a new database connection."""
        raise NotImplementedError

    @abstractmethod
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[ConnectionT, None, None]":
        """Provide a database connection context manager."""
        raise NotImplementedError

    @abstractmethod
    def provide_session(self, *args: Any, **kwargs: Any) -> "Generator[DriverT, None, None]":
        """Provide a database session context manager."""
        raise NotImplementedError


class NoPoolSyncConfig(DatabaseConfigProtocol[ConnectionT, DriverT]):
    """Base class for sync database configurations that open one connection per session."""

    __slots__ = ()

    def __init__(
        self,
        *,
        connection_config: "dict[str, Any] | None" = None,
        statement_config: "StatementConfig | None" = None,
    ) -> None:
        self.connection_config: dict[str, Any] = dict(connection_config or {})
        self.statement_config = statement_config or self.default_statement_config()

    def default_statement_config(self) -> StatementConfig:
        return StatementConfig()

    def _connection_kwargs(self) -> "dict[str, Any]":
        return {key: value for key, value in self.connection_config.items() if value is not None}

    @contextmanager
    def provide_connection(self, *args: Any, **kwargs: Any) -> "Generator[ConnectionT, None, None]":
        """Provide a connection that is closed when the context exits."""
        connection = self.create_connection()
        try:
            yield connection
        finally:
            close = getattr(connection, "close", None)
            if close is not None:
                close()
            logger.debug("Closed %s connection", type(self).__name__)

    @contextmanager
    def provide_session(
        self, *args: Any, statement_config: "StatementConfig | None" = None, **kwargs: Any
    ) -> "Generator[DriverT, None, None]":
        """Provide a driver bound to a fresh connection."""
        with self.provide_connection(*args, **kwargs) as connection:
            yield self.driver_type(connection=connection, statement_config=statement_config or self.statement_config)
