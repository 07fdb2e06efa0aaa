"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

One JSON object per log line, built from typed events.

Design:
- StructuredLogger builds the entry, JSONFormatter serializes it
- Entries travel on the LogRecord (extra={'structured': ...})
- Bound context (bind()) is merged into every entry's metadata
- Disabled levels return before any entry is built

Output:
    {
        "timestamp": "2026-10-17T15:30:45.123456+00:00",
        "level": "INFO",
        "component": "validator",
        "event": "group.validated",
        "message": "Success: All sectors within area and clear of overlap",
        "metadata": {"path": "survey.csv", "area_id": "A1", "sector_count": 3}
    }
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent

ENTRY_ATTR = 'structured'


class JSONFormatter(logging.Formatter):
    """
    Serializes the entry attached by StructuredLogger.

    Records from plain loggers (no entry) are rendered with the same
    keys and event set to null.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = getattr(record, ENTRY_ATTR, None)
        if entry is None:
            entry = {
                'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
                'level': record.levelname,
                'component': record.name,
                'event': None,
                'message': record.getMessage(),
            }
        return json.dumps(entry, default=str)


class StructuredLogger:
    """
    JSON logger for one component.

    Attributes:
        component: Component name (e.g. "validator", "publisher")
        logger: Underlying logger "gpsval.<component>"
        context: Metadata added to every entry

    Loggers of the same component share one handler; bind() only
    changes the context.
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.component = component
        self.logger_name = logger_name or f"gpsval.{component}"
        self.context = dict(context or {})

        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)
            self.logger.propagate = False

    def bind(self, **context: Any) -> "StructuredLogger":
        """Logger for the same component with extra context metadata."""
        return StructuredLogger(
            self.component,
            level=self.logger.level,
            logger_name=self.logger_name,
            context={**self.context, **context},
        )

    def log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        """
        Emit one entry.

        Args:
            level: logging level number
            event: Typed log event
            message: Human-readable message
            metadata: Entry-specific context, merged over bound context
            exc_info: Exception summarized as {"type", "message"}
        """
        if not self.logger.isEnabledFor(level):
            return

        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }
        merged = {**self.context, **(metadata or {})}
        if merged:
            entry['metadata'] = merged
        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
            }

        self.logger.log(level, message, extra={ENTRY_ATTR: entry})

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.INFO, event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        """
        Log an error, optionally with the exception that caused it.

        Example:
            >>> try:
            ...     records = list(read_records(path))
            ... except RecordError as e:
            ...     logger.error(
            ...         event=LogEvent.INPUT_ERROR,
            ...         message="Failed to read survey file",
            ...         exc_info=e,
            ...     )
        """
        self.log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)


def create_logger(component: str, level: int = logging.INFO, **context: Any) -> StructuredLogger:
    """
    Create a StructuredLogger, optionally with bound context.

    Example:
        >>> logger = create_logger("validator", level=logging.DEBUG, path="survey.csv")
    """
    return StructuredLogger(component=component, level=level, context=context)
