"""PyMySQL adapter for sqlmark."""

from sqlmark.adapters.pymysql._types import PyMysqlConnection
from sqlmark.adapters.pymysql.config import PyMysqlConfig, PyMysqlConnectionParams
from sqlmark.adapters.pymysql.driver import PyMysqlDriver, PyMysqlStatement, default_statement_config, render_pyformat

__all__ = (
    "PyMysqlConfig",
    "PyMysqlConnection",
    "PyMysqlConnectionParams",
    "PyMysqlDriver",
    "PyMysqlStatement",
    "default_statement_config",
    "render_pyformat",
)
