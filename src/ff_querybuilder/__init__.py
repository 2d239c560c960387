"""
ff-querybuilder: Fluent, injection-safe SELECT statement builder.

Features:
- Method-chained SELECT, FROM, WHERE, HAVING and ORDER BY clauses
- AND/OR/XOR connectors applied to the next condition
- MySQL/MariaDB SELECT modifiers, identifier quoting and value literals
- Pluggable escaping backends (PyMySQL converters or a live connection)
- Structured logging with structlog, settings with pydantic-settings
"""

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("ff-querybuilder")
except Exception:
    __version__ = "1.0.0"

from .backends import (
    ConnectionBackend,
    MySQLBackend,
    MySQLConnectionBackend,
    MySQLEscaper,
    detect_backend,
)
from .config import QueryBuilderSettings, get_settings, load_settings
from .exceptions import (
    ConfigurationError,
    ConnectionError,
    ConnectionFailure,
    EscapeError,
    QueryBuilderError,
    UnsupportedBackendError,
)
from .log import JSONLogger, NullLogger, ScopedLogger, configure_logging, get_logger
from .query_builder import Connector, DMLQueryBuilder, MySQLDMLQueryBuilder

__all__ = [
    # Version
    "__version__",
    # Builders
    "DMLQueryBuilder",
    "MySQLDMLQueryBuilder",
    "Connector",
    # Backends
    "ConnectionBackend",
    "MySQLBackend",
    "MySQLEscaper",
    "MySQLConnectionBackend",
    "detect_backend",
    # Configuration
    "QueryBuilderSettings",
    "get_settings",
    "load_settings",
    # Logging
    "ScopedLogger",
    "JSONLogger",
    "NullLogger",
    "get_logger",
    "configure_logging",
    # Exceptions
    "QueryBuilderError",
    "ConfigurationError",
    "ConnectionError",
    "ConnectionFailure",
    "EscapeError",
    "UnsupportedBackendError",
]
