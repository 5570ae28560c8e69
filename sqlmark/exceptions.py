from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "DatabaseConnectionError",
    "ExtraParameterError",
    "ImproperConfigurationError",
    "MalformedTemplateError",
    "MissingDependencyError",
    "MissingParameterError",
    "ParameterError",
    "ParameterStyleMismatchError",
    "SQLMarkError",
    "StatementError",
    "wrap_exceptions",
)


class SQLMarkError(Exception):
    """Base exception class from which all sqlmark exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLMarkError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLMarkError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlmark[{install_package or package}]' to install sqlmark with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLMarkError):
    """Improper Configuration error."""


class DatabaseConnectionError(SQLMarkError):
    """The driver could not open a connection to the database."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Could not connect to the database."
        super().__init__(message)


class StatementError(SQLMarkError):
    """Preparing or executing a statement failed."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


# -- SQL Parameter Errors --
class ParameterError(SQLMarkError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MalformedTemplateError(ParameterError):
    """Raised when a template contains a placeholder token with an unknown kind."""


class MissingParameterError(ParameterError):
    """Raised when a template has more placeholder tokens than arguments."""


class ExtraParameterError(ParameterError):
    """Raised when more arguments are supplied than the template consumes."""


class ParameterStyleMismatchError(SQLMarkError):
    """Error when parameter style doesn't match SQL placeholder style.

    This exception is raised when arguments are supplied for a template that has
    no placeholder tokens, and the first argument is not a mapping of named
    (``:name``) markers.
    """

    sql: Optional[str]

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        final_message = message
        if final_message is None:
            final_message = (
                "Parameter style mismatch: arguments provided but no placeholder tokens or named markers found in SQL."
            )

        detail_message = final_message
        if sql:
            detail_message = f"{final_message}\nSQL: {sql}"

        super().__init__(detail=detail_message)
        self.sql = sql


@contextmanager
def wrap_exceptions(wrap_exceptions: bool = True) -> Generator[None, None, None]:
    try:
        yield

    except SQLMarkError:
        raise
    except Exception as exc:
        if wrap_exceptions is False:
            raise
        msg = "An error occurred during the operation."
        raise SQLMarkError(detail=msg) from exc
