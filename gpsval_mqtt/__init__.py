"""
GPS Validator MQTT Package
==========================

Bounded Context: Publishing validation results over MQTT

Publishers:
    VerdictPublisher: ValidationSink that publishes verdicts + progress
    BasePublisher: connection management for custom publishers

Example:
    >>> from gpsval_logging import create_logger
    >>> from gpsval_mqtt import VerdictPublisher
    >>> from gpsval_validation import MQTTConfig
    >>>
    >>> publisher = VerdictPublisher(
    ...     MQTTConfig(broker="localhost", verdict_topic="gpsval/verdicts"),
    ...     logger=create_logger("publisher")
    ... )
    >>> if publisher.connect():
    ...     validator.run(records, publisher)
    ...     publisher.disconnect()
"""

from gpsval_mqtt.base import BasePublisher, PublisherStats
from gpsval_mqtt.verdict import VerdictPublisher

__all__ = [
    'BasePublisher',
    'PublisherStats',
    'VerdictPublisher',
]
