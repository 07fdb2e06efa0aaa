"""
Structured Logging for GPS Sector Validation
============================================

Bounded Context: Observability

JSON-structured logging with a typed event taxonomy.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation (bind() adds context)
    JSONFormatter: Formats structured and plain records as one JSON line
    create_logger: Factory function

Example:
    >>> from gpsval_logging import create_logger, LogEvent
    >>> logger = create_logger("validator")
    >>> logger.info(
    ...     event=LogEvent.BATCH_FINISHED,
    ...     message="Validated 4 groups",
    ...     metadata={'groups': 4, 'failed': 1}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, JSONFormatter, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'JSONFormatter',
    'create_logger',
]
