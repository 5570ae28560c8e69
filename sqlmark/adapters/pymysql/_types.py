from typing import TYPE_CHECKING

from sqlmark.exceptions import MissingDependencyError

try:
    import pymysql
    from pymysql.connections import Connection
except ImportError as e:
    raise MissingDependencyError(package="pymysql", install_package="pymysql") from e

if TYPE_CHECKING:
    from typing_extensions import TypeAlias

    PyMysqlConnection: TypeAlias = Connection
else:
    PyMysqlConnection = Connection

__all__ = ("PyMysqlConnection", "pymysql")
