"""
Custom exceptions for the ff-querybuilder package.
"""


class QueryBuilderError(Exception):
    """Base exception for all query builder errors."""

    pass


class ConfigurationError(QueryBuilderError):
    """Raised when settings are invalid or cannot be loaded."""

    pass


class ConnectionError(QueryBuilderError):
    """Base exception for backend connection problems."""

    pass


class ConnectionFailure(ConnectionError):
    """Raised when a backend has no usable connection."""

    def __init__(self, message: str, backend: str = None):
        self.backend = backend

        if backend:
            message = f"{backend}: {message}"

        super().__init__(message)


class EscapeError(QueryBuilderError):
    """
    Raised when a backend fails to escape a value.

    The raw value is intentionally not stored on the exception.
    """

    def __init__(self, message: str, dialect: str = None):
        self.dialect = dialect

        if dialect:
            message = f"Escaping failed for {dialect}: {message}"

        super().__init__(message)


class UnsupportedBackendError(QueryBuilderError, ValueError):
    """Raised when no backend matches a database connection."""

    def __init__(self, connection_type: str, supported: list = None):
        self.connection_type = connection_type
        self.supported = supported or []

        if supported:
            message = (
                f"Unsupported database connection type: {connection_type}. "
                f"Supported: {', '.join(supported)}"
            )
        else:
            message = f"Unsupported database connection type: {connection_type}"

        super().__init__(message)
