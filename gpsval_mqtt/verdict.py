"""
Verdict Publisher
=================

Bounded Context: Validation output over MQTT

A ValidationSink that publishes verdicts and progress as JSON.

Message Flow:
    BatchValidator → ValidationEvent → VerdictPublisher → MQTT Broker

Topics:
    <verdict_topic>             one message per verdict event
    <verdict_topic>/progress    {"completed", "total", "fraction"}

Example:
    >>> publisher = VerdictPublisher(
    ...     MQTTConfig(broker="localhost"),
    ...     logger=create_logger("publisher")
    ... )
    >>> publisher.connect()
    >>> validator.run(records, MultiSink(TextSink(), publisher))
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from gpsval_logging import LogEvent, StructuredLogger
from gpsval_mqtt.base import BasePublisher
from gpsval_validation.config import MQTTConfig
from gpsval_validation.events import ValidationEvent
from gpsval_validation.sinks import progress_fraction

SCHEMA_VERSION = "1.0"


class VerdictPublisher(BasePublisher):
    """
    Publishes validation events to MQTT.

    GROUP_STARTED events are not published; only verdict events are.
    Progress is published only when the whole percent value changes.
    """

    def __init__(self, config: MQTTConfig, logger: StructuredLogger):
        super().__init__(config, topic=config.verdict_topic, logger=logger)
        self.schema_version = SCHEMA_VERSION
        self.progress_topic = config.progress_topic
        self._last_percent: Optional[int] = None

    def format_message(self, event: ValidationEvent) -> Dict[str, Any]:
        """
        Format a ValidationEvent to a JSON-compatible dict.

        Example:
            {
                "schema_version": "1.0",
                "timestamp": "2026-10-17T10:00:00+00:00",
                "area_id": "A1",
                "event_type": "sectors_checked",
                "verdict": "Success: All sectors within area and clear of overlap",
                "valid": true,
                "detail": null
            }
        """
        return {
            'schema_version': self.schema_version,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            **event.to_dict(),
        }

    def format_progress(self, completed: int, total: int) -> Dict[str, Any]:
        return {
            'completed': completed,
            'total': total,
            'fraction': progress_fraction(completed, total),
        }

    def publish(self, message_data, topic: Optional[str] = None, retain: bool = False) -> bool:
        """Publish a verdict event, or an already formatted dict."""
        if isinstance(message_data, ValidationEvent):
            if not message_data.is_verdict:
                return False
            message_data = self.format_message(message_data)
        return super().publish(message_data, topic=topic, retain=retain)

    def progress(self, completed: int, total: int) -> None:
        percent = int(progress_fraction(completed, total) * 100)
        if percent == self._last_percent:
            return
        self._last_percent = percent
        if not super().publish(self.format_progress(completed, total), topic=self.progress_topic):
            self.logger.debug(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message="Progress update dropped",
                metadata={'completed': completed, 'total': total}
            )
