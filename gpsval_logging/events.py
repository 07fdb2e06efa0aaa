"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging.

Event Naming Convention:
    <component>.<category>.<action>

    component: batch, group, mqtt, error

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.area_id
    | filter event = "group.sector_outside"
    | stats count() by metadata.area_id
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - batch.*: Batch pass lifecycle
    - group.*: Per-area group validation
    - mqtt.*: MQTT broker interactions
    - error.*: Error conditions
    """

    # ========== Batch Events ==========
    BATCH_STARTED = "batch.started"
    """Batch pass started consuming records."""

    BATCH_FINISHED = "batch.finished"
    """Batch pass consumed every record and flushed the last group."""

    BATCH_CANCELLED = "batch.cancelled"
    """Batch pass stopped early on cancellation."""

    # ========== Group Events ==========
    GROUP_STARTED = "group.started"
    """New area identifier seen; a group was opened."""

    GROUP_AREA_INVALID = "group.area_invalid"
    """Area diagonal corners share a latitude or longitude."""

    GROUP_SECTOR_OUTSIDE = "group.sector_outside"
    """A sector is not fully contained by its area."""

    GROUP_SECTORS_OVERLAP = "group.sectors_overlap"
    """Two sectors of the same area overlap."""

    GROUP_VALIDATED = "group.validated"
    """Group validation finished with a verdict."""

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost."""

    MQTT_PUBLISH_SUCCESS = "mqtt.publish.success"
    """Message successfully published to broker."""

    MQTT_PUBLISH_FAILED = "mqtt.publish.failed"
    """Message publication failed."""

    # ========== Error Events ==========
    INPUT_ERROR = "error.input"
    """Record source could not be read or parsed."""

    SERIALIZATION_ERROR = "error.serialization"
    """Failed to serialize message to JSON."""

    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
    """Failed to connect to MQTT broker."""


# Event categories for filtering
BATCH_EVENTS = {
    LogEvent.BATCH_STARTED,
    LogEvent.BATCH_FINISHED,
    LogEvent.BATCH_CANCELLED,
}

GROUP_EVENTS = {
    LogEvent.GROUP_STARTED,
    LogEvent.GROUP_AREA_INVALID,
    LogEvent.GROUP_SECTOR_OUTSIDE,
    LogEvent.GROUP_SECTORS_OVERLAP,
    LogEvent.GROUP_VALIDATED,
}

MQTT_EVENTS = {
    LogEvent.MQTT_CONNECTED,
    LogEvent.MQTT_DISCONNECTED,
    LogEvent.MQTT_PUBLISH_SUCCESS,
    LogEvent.MQTT_PUBLISH_FAILED,
}

ERROR_EVENTS = {
    LogEvent.INPUT_ERROR,
    LogEvent.SERIALIZATION_ERROR,
    LogEvent.MQTT_CONNECTION_ERROR,
}
