"""
Escaping backends for the query builders.

A backend is the only thing a builder needs from the database layer: a way
to escape raw strings for the dialect. Connection lifecycle, transactions and
query execution stay with the caller's database driver.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pymysql.converters import escape_string as pymysql_escape_string

from .config import QueryBuilderSettings, get_settings
from .exceptions import ConnectionFailure, UnsupportedBackendError


class ConnectionBackend(ABC):
    """
    Abstract base class for escaping backends.

    Implementations must be deterministic and side-effect free: escaping the
    same input twice gives the same output and changes no builder state.
    """

    dialect: str = "generic"

    @abstractmethod
    def escape_string(self, raw: str) -> str:
        """
        Escape a string to be used inside a quoted SQL literal.

        Args:
            raw: The string to escape

        Returns:
            The escaped string, without surrounding quotes
        """
        pass

    @abstractmethod
    def get_query_builder(self, **kwargs: Any):
        """Return a new query builder for this backend's dialect."""
        pass


class MySQLBackend(ConnectionBackend):
    """Shared MySQL behaviour for escaping backends."""

    dialect = "mysql"

    def get_query_builder(self, **kwargs: Any):
        """Return a new MySQL query builder bound to this backend."""
        from ff_querybuilder.query_builder import MySQLDMLQueryBuilder

        return MySQLDMLQueryBuilder(self, **kwargs)


class MySQLEscaper(MySQLBackend):
    """
    Connection-less MySQL escaping using PyMySQL's converters.

    Suitable when the server's sql_mode is known up front. With
    NO_BACKSLASH_ESCAPES active only single quotes are doubled, since the
    server then treats backslashes literally.
    """

    def __init__(
        self,
        no_backslash_escapes: Optional[bool] = None,
        settings: Optional[QueryBuilderSettings] = None,
    ):
        """
        Initialize the escaper.

        Args:
            no_backslash_escapes: Whether the server runs with NO_BACKSLASH_ESCAPES
                (default: from settings)
            settings: Settings override (default: get_settings())
        """
        if no_backslash_escapes is None:
            no_backslash_escapes = (settings or get_settings()).no_backslash_escapes
        self.no_backslash_escapes = no_backslash_escapes

    def escape_string(self, raw: str) -> str:
        if self.no_backslash_escapes:
            return raw.replace("'", "''")
        return pymysql_escape_string(raw)

    def __repr__(self) -> str:
        return f"MySQLEscaper(no_backslash_escapes={self.no_backslash_escapes!r})"


class MySQLConnectionBackend(MySQLBackend):
    """
    Escaping through a live MySQL DB-API connection.

    Works with PyMySQL, aiomysql and mysqlclient connections, which all
    expose escape_string() and honour the session's sql_mode.
    """

    def __init__(self, connection):
        """
        Initialize the backend.

        Args:
            connection: Open database connection owned by the caller
        """
        self.connection = connection

    def escape_string(self, raw: str) -> str:
        if self.connection is None:
            raise ConnectionFailure("No database connection available for escaping", self.dialect)

        escaped = self.connection.escape_string(raw)

        # mysqlclient returns bytes
        if isinstance(escaped, (bytes, bytearray)):
            escaped = bytes(escaped).decode("utf-8")
        return escaped


_CONNECTION_MODULES = ("pymysql", "aiomysql", "MySQLdb")


def detect_backend(connection) -> ConnectionBackend:
    """
    Automatically detect the database type from a connection and return a backend.

    Args:
        connection: Database connection object

    Returns:
        Appropriate ConnectionBackend instance

    Raises:
        UnsupportedBackendError: If the connection type cannot be determined
    """
    module = connection.__module__ if hasattr(connection, "__module__") else str(type(connection))

    if module.split(".")[0] in _CONNECTION_MODULES:
        return MySQLConnectionBackend(connection)

    raise UnsupportedBackendError(module, list(_CONNECTION_MODULES))
