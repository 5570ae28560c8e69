"""PyMySQL database configuration."""

from typing import TYPE_CHECKING, Any, ClassVar, TypedDict

from typing_extensions import NotRequired

from sqlmark.adapters.pymysql._types import PyMysqlConnection, pymysql
from sqlmark.adapters.pymysql.driver import PyMysqlDriver, default_statement_config
from sqlmark.config import NoPoolSyncConfig
from sqlmark.exceptions import DatabaseConnectionError
from sqlmark.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlmark.core.statement import StatementConfig

__all__ = ("PyMysqlConfig", "PyMysqlConnectionParams")

logger = get_logger("adapters.pymysql.config")


class PyMysqlConnectionParams(TypedDict, total=False):
    """PyMySQL connection parameters.

    Passed to ``pymysql.connect()``; keys set to None are dropped.
    """

    host: NotRequired[str]
    """Host where the database server is located."""

    user: NotRequired[str]
    """The username used to authenticate with the database."""

    password: NotRequired[str]
    """The password used to authenticate with the database."""

    database: NotRequired[str]
    """The database name to use."""

    port: NotRequired[int]
    """The TCP/IP port of the MySQL server."""

    unix_socket: NotRequired[str]
    """The location of the Unix socket file."""

    charset: NotRequired[str]
    """The character set to use for the connection."""

    connect_timeout: NotRequired[float]
    """Timeout before throwing an error when connecting."""

    read_timeout: NotRequired[float]
    write_timeout: NotRequired[float]

    autocommit: NotRequired[bool]
    """If True, autocommit mode will be enabled."""

    local_infile: NotRequired[bool]
    ssl: NotRequired[Any]
    sql_mode: NotRequired[str]
    init_command: NotRequired[str]


class PyMysqlConfig(NoPoolSyncConfig[PyMysqlConnection, PyMysqlDriver]):
    """Configuration for PyMySQL connections, one connection per session."""

    driver_type: "ClassVar[type[PyMysqlDriver]]" = PyMysqlDriver
    connection_type: "ClassVar[type[PyMysqlConnection]]" = PyMysqlConnection

    def __init__(
        self,
        *,
        connection_config: "PyMysqlConnectionParams | dict[str, Any] | None" = None,
        statement_config: "StatementConfig | None" = None,
    ) -> None:
        config = dict(connection_config or {})
        config.setdefault("host", "localhost")
        config.setdefault("port", 3306)
        config.setdefault("charset", "utf8mb4")
        config.setdefault("autocommit", True)
        super().__init__(connection_config=config, statement_config=statement_config)

    def default_statement_config(self) -> "StatementConfig":
        return default_statement_config

    def create_connection(self) -> PyMysqlConnection:
        """Open a new PyMySQL connection.

        Raises:
            DatabaseConnectionError: If the server cannot be reached or rejects the login.
        """
        try:
            connection = pymysql.connect(**self._connection_kwargs())
        except pymysql.Error as e:
            msg = f"Could not connect to MySQL at {self.connection_config.get('host')}: {e}"
            raise DatabaseConnectionError(msg) from e
        logger.debug("Opened MySQL connection to %s", self.connection_config.get("host"))
        return connection
