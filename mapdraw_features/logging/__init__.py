"""
Structured Logging for MapDraw Features
=======================================

Bounded Context: Observability

JSON-structured logging with a typed event taxonomy.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function
    configure_logging: Set the package-wide level
"""

from .events import LogEvent
from .structured import StructuredLogger, configure_logging, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
    'configure_logging',
]
