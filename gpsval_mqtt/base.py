"""
Base MQTT Publisher
==================

Bounded Context: MQTT Infrastructure

Connection handling shared by MQTT publishers.

Design:
- Built from MQTTConfig (broker, credentials, QoS)
- paho-mqtt network loop runs on its own thread while connected
- A failed connect leaves no loop thread behind
- Publish failures are logged and reported as False, never raised

Architecture:
    BasePublisher (abstract)
        ↓
    VerdictPublisher (concrete)
"""

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt

from gpsval_logging import StructuredLogger, LogEvent
from gpsval_validation.config import MQTTConfig


@dataclass(frozen=True)
class PublisherStats:
    """Snapshot of publisher activity."""

    broker: str
    topic: str
    connected: bool
    message_count: int


class BasePublisher(ABC):
    """
    Abstract MQTT publisher.

    Subclasses implement format_message(); publish() sends any
    JSON-serializable dict to the default or a given topic.

    Attributes:
        config: Broker settings
        topic: Default topic
        logger: Structured logger instance
    """

    def __init__(self, config: MQTTConfig, topic: str, logger: StructuredLogger):
        self.config = config
        self.topic = topic
        self.logger = logger

        self.client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=config.client_id,
        )
        if config.username and config.password:
            self.client.username_pw_set(config.username, config.password)
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        self._connected = threading.Event()
        self._loop_running = False
        self._message_count = 0
        self._stats_lock = threading.Lock()

    @property
    def broker(self) -> str:
        return f"{self.config.broker}:{self.config.port}"

    @property
    def qos(self) -> int:
        return self.config.qos

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message=f"Broker refused connection ({reason_code})",
                metadata={'broker': self.broker}
            )
            return

        self._connected.set()
        self.logger.info(
            event=LogEvent.MQTT_CONNECTED,
            message="Connected to MQTT broker",
            metadata={'broker': self.broker, 'topic': self.topic}
        )

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties) -> None:
        self._connected.clear()
        self.logger.warning(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Broker connection closed",
            metadata={'broker': self.broker, 'reason_code': str(reason_code)}
        )

    def connect(self, timeout: float = 10.0) -> bool:
        """
        Connect and start the network loop.

        Args:
            timeout: Seconds to wait for the broker's CONNACK

        Returns:
            True once connected. On False the loop thread is already stopped.
        """
        try:
            self.client.connect(self.config.broker, self.config.port)
        except OSError as e:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Broker unreachable",
                exc_info=e,
                metadata={'broker': self.broker}
            )
            return False

        self.client.loop_start()
        self._loop_running = True

        if self._connected.wait(timeout=timeout):
            return True

        self.logger.error(
            event=LogEvent.MQTT_CONNECTION_ERROR,
            message=f"No CONNACK within {timeout}s",
            metadata={'broker': self.broker}
        )
        self._stop_loop()
        return False

    def _stop_loop(self) -> None:
        if self._loop_running:
            self.client.loop_stop()
            self._loop_running = False

    def disconnect(self) -> None:
        """Disconnect and stop the network loop."""
        self.client.disconnect()
        self._stop_loop()
        self.logger.info(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Disconnected from broker",
            metadata={'broker': self.broker, 'message_count': self.stats.message_count}
        )

    def is_connected(self) -> bool:
        return self._connected.is_set()

    @abstractmethod
    def format_message(self, *args, **kwargs) -> Dict[str, Any]:
        """Build the JSON-compatible payload for one message."""

    def publish(
        self,
        message_data: Dict[str, Any],
        topic: Optional[str] = None,
        retain: bool = False
    ) -> bool:
        """
        Send a formatted message.

        Args:
            message_data: JSON-compatible dict
            topic: Topic override (default: self.topic)
            retain: MQTT retain flag

        Returns:
            True if the client accepted the message
        """
        topic = topic or self.topic

        if not self.is_connected():
            self.logger.warning(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message="Not connected, message dropped",
                metadata={'topic': topic}
            )
            return False

        payload = self._serialize(message_data, topic)
        if payload is None:
            return False

        info = self.client.publish(topic=topic, payload=payload, qos=self.qos, retain=retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self.logger.warning(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message=f"Client rejected message (rc={info.rc})",
                metadata={'topic': topic}
            )
            return False

        with self._stats_lock:
            self._message_count += 1
        self.logger.debug(
            event=LogEvent.MQTT_PUBLISH_SUCCESS,
            message="Message sent",
            metadata={'topic': topic, 'qos': self.qos}
        )
        return True

    def _serialize(self, message_data: Dict[str, Any], topic: str) -> Optional[str]:
        try:
            return json.dumps(message_data)
        except (TypeError, ValueError) as e:
            self.logger.error(
                event=LogEvent.SERIALIZATION_ERROR,
                message="Message is not JSON serializable",
                exc_info=e,
                metadata={'topic': topic}
            )
            return None

    @property
    def stats(self) -> PublisherStats:
        with self._stats_lock:
            count = self._message_count
        return PublisherStats(
            broker=self.broker,
            topic=self.topic,
            connected=self.is_connected(),
            message_count=count,
        )
