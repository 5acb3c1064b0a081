"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

Wraps Python's logging module and emits one JSON object per record.

Example:
    >>> logger = StructuredLogger(component="predicates")
    >>> logger.warning(
    ...     event=LogEvent.GEOMETRY_INVALID,
    ...     message="Invalid polygon",
    ...     metadata={'geometry': {'type': 'Polygon', 'coordinates': []}}
    ... )

Output:
    {
        "timestamp": "2026-10-19T15:30:45.123456",
        "level": "WARNING",
        "component": "predicates",
        "event": "geometry.invalid",
        "message": "Invalid polygon",
        "metadata": {"geometry": {"type": "Polygon", "coordinates": []}}
    }
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from .events import LogEvent

PACKAGE_LOGGER = "mapdraw_features"


class StructuredLogger:
    """
    JSON structured logger.

    Attributes:
        component: Component name (e.g., "normalizer", "query")
        logger: Underlying Python logger instance

    Thread Safety:
        Thread-safe via Python's logging module.
    """

    def __init__(self, component: str, logger_name: Optional[str] = None):
        """
        Initialize structured logger.

        The level is inherited from the package logger (see configure_logging).

        Args:
            component: Component identifier (e.g., "normalizer")
            logger_name: Custom logger name (default: mapdraw_features.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"{PACKAGE_LOGGER}.{component}"
        self.logger = logging.getLogger(self.logger_name)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: str,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        """
        Build the structured entry and hand it to the stdlib logger.

        Args:
            level: Log level name (DEBUG, INFO, WARNING, ERROR)
            event: Typed log event
            message: Human-readable message
            metadata: Additional context
            exc_info: Exception for ERROR logs
        """
        log_level = getattr(logging, level)
        if not self.logger.isEnabledFor(log_level):
            return

        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            log_entry['metadata'] = metadata

        if exc_info:
            log_entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(log_level, json.dumps(log_entry, default=str))

    def debug(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log DEBUG level message."""
        self._log('DEBUG', event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log WARNING level message."""
        self._log('WARNING', event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        """
        Log ERROR level message.

        Example:
            >>> try:
            ...     normalize(raw)
            ... except ParseError as e:
            ...     logger.error(
            ...         event=LogEvent.GEOJSON_PARSE_ERROR,
            ...         message="Failed to parse features",
            ...         exc_info=e,
            ...     )
        """
        self._log('ERROR', event, message, metadata, exc_info)


class JSONFormatter(logging.Formatter):
    """Pass-through formatter; StructuredLogger already renders JSON."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(component: str) -> StructuredLogger:
    """
    Factory function to create a StructuredLogger.

    Args:
        component: Component identifier

    Returns:
        StructuredLogger under the package logger
    """
    return StructuredLogger(component=component)


def configure_logging(level: int) -> None:
    """
    Set the level of the package logger.

    Component loggers keep NOTSET and inherit this level, so one call
    governs the normalizer, predicates, query and record loggers alike.
    """
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
