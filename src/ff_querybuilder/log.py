"""
Structured logging for ff-querybuilder using structlog.

Builders and backends take any object with the ScopedLogger method surface,
so callers can inject their own structlog logger or a NullLogger.
"""

import logging
from typing import Any

import structlog
from structlog.types import Processor

from .config import QueryBuilderSettings, get_settings


def _level_number(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def _drop_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    raise structlog.DropEvent


class ScopedLogger:
    """
    Scoped logger with its own context, level and processor chain.

    Renders human-readable console output by default.
    """

    def __init__(
        self,
        name: str,
        context: dict[str, Any] | None = None,
        level: str = "INFO",
        colors: bool = True,
        processors: list[Processor] | None = None,
    ):
        """
        Initialize a scoped logger.

        Args:
            name: Logger name/scope identifier
            context: Initial context dictionary
            level: Minimum level that is emitted
            colors: Whether the console renderer uses colors
            processors: List of structlog processors (overrides the defaults)
        """
        self.name = name
        self.level = level.upper()
        self.colors = colors
        self._context = dict(context or {})
        self._context["logger"] = name

        if processors is None:
            processors = self._get_default_processors()
        self._processors = processors

        self._logger = structlog.get_logger(
            name,
            wrapper_class=structlog.make_filtering_bound_logger(_level_number(self.level)),
            processors=processors,
            cache_logger_on_first_use=True,
        ).bind(**self._context)

    def _get_default_processors(self) -> list[Processor]:
        return [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=self.colors),
        ]

    def bind(self, **kwargs: Any) -> "ScopedLogger":
        """
        Return a new logger of the same type with extra context bound.

        Args:
            **kwargs: Key-value pairs to bind to the logger context
        """
        return self.__class__(
            name=self.name,
            context={**self._context, **kwargs},
            level=self.level,
            colors=self.colors,
            processors=self._processors,
        )

    def debug(self, event: str, **kwargs: Any) -> None:
        self._logger.debug(event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._logger.info(event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._logger.warning(event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._logger.error(event, **kwargs)

    def exception(self, event: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(event, **kwargs)

    @property
    def context(self) -> dict[str, Any]:
        """Get the current logger context."""
        return self._context.copy()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, level={self.level!r})"


class JSONLogger(ScopedLogger):
    """A logger that renders one JSON object per event, for log shippers."""

    def _get_default_processors(self) -> list[Processor]:
        return [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]


class NullLogger:
    """
    A logger that discards everything.

    Example:
        builder = MySQLDMLQueryBuilder(backend, logger=NullLogger("quiet"))
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None, **kwargs: Any):
        self.name = name
        self._context = dict(context or {})

    def bind(self, **kwargs: Any) -> "NullLogger":
        """Bind context (no-op, returns self for chaining)."""
        return self

    def debug(self, event: str, **kwargs: Any) -> None:
        pass

    def info(self, event: str, **kwargs: Any) -> None:
        pass

    def warning(self, event: str, **kwargs: Any) -> None:
        pass

    def error(self, event: str, **kwargs: Any) -> None:
        pass

    def exception(self, event: str, **kwargs: Any) -> None:
        pass

    @property
    def context(self) -> dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        return f"NullLogger(name={self.name!r})"


# Logger type mapping
_LOGGER_TYPES = {
    "console": ScopedLogger,
    "json": JSONLogger,
    "null": NullLogger,
    "none": NullLogger,  # Alias for null
}


def get_logger(
    name: str,
    logger_type: str | None = None,
    settings: QueryBuilderSettings | None = None,
) -> ScopedLogger | JSONLogger | NullLogger:
    """
    Get a logger instance based on configuration.

    Args:
        name: Logger name/scope
        logger_type: Override logger type (console, json, null)
        settings: Settings to read defaults from (default: get_settings())

    Returns:
        Logger instance of the appropriate type

    Raises:
        ValueError: If the logger type is unknown
    """
    settings = settings or get_settings()
    logger_type = (logger_type or settings.log_format).lower()

    logger_class = _LOGGER_TYPES.get(logger_type)
    if logger_class is None:
        raise ValueError(f"Unknown logger type: {logger_type}")

    if logger_class is NullLogger:
        return NullLogger(name)

    return logger_class(name, level=settings.log_level, colors=settings.log_colors)


def configure_logging(settings: QueryBuilderSettings | None = None) -> None:
    """
    Configure structlog globally from settings.

    Affects loggers obtained through structlog.get_logger() without explicit
    processors; ScopedLogger instances keep their own chains.
    """
    settings = settings or get_settings()

    processors: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    elif settings.log_format == "null":
        processors = [_drop_event]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=settings.log_colors))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(settings.log_level)),
        cache_logger_on_first_use=True,
    )
