"""
Configuration schema for the survey validator.

Defines the CSV column mapping, logging and progress settings, and the
optional MQTT sink. Loaded from YAML and validated at startup.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Union

import yaml

from gpsval_validation.records import ColumnMapping

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration for the verdict publisher."""

    broker: str
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 1
    client_id: str = "gpsval_verdict_publisher"
    verdict_topic: str = "gpsval/verdicts"

    def __post_init__(self):
        """Validate MQTT configuration."""
        if not self.broker:
            raise ValueError("MQTT broker cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ValueError(
                f"MQTT port must be in [1, 65535], got {self.port}"
            )

        if self.qos not in {0, 1, 2}:
            raise ValueError(
                f"MQTT QoS must be 0, 1, or 2, got {self.qos}"
            )

        if not self.verdict_topic:
            raise ValueError("verdict_topic cannot be empty")

    @property
    def progress_topic(self) -> str:
        return f"{self.verdict_topic}/progress"


@dataclass(frozen=True)
class ValidatorConfig:
    """
    Main configuration for a validation run.

    Immutable after construction (frozen dataclass).
    """

    columns: ColumnMapping = field(default_factory=ColumnMapping)
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    show_progress: bool = False
    mqtt_config: Optional[MQTTConfig] = None

    def __post_init__(self):
        """Validate validator configuration."""
        level = str(self.log_level).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of {sorted(VALID_LOG_LEVELS)}"
            )
        object.__setattr__(self, 'log_level', level)

        if self.log_file is not None and not isinstance(self.log_file, Path):
            object.__setattr__(self, 'log_file', Path(self.log_file))

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    def with_overrides(self, **changes) -> "ValidatorConfig":
        """Copy with non-None values replaced (CLI flags over file values)."""
        changes = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "ValidatorConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            log_level: "INFO"
            log_file: "logs/validator.log"
            show_progress: true

            columns:
              area_id: "AreaID"
              sector_id: "SectorID"

            mqtt_config:
              broker: "localhost"
              port: 1883
              verdict_topic: "gpsval/verdicts"
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping: {yaml_path}")

        columns = ColumnMapping.from_dict(data.get("columns"))

        mqtt_data = data.get("mqtt_config")
        mqtt_config = MQTTConfig(**mqtt_data) if mqtt_data else None

        log_file = data.get("log_file")

        return cls(
            columns=columns,
            log_level=data.get("log_level", "INFO"),
            log_file=Path(log_file) if log_file else None,
            show_progress=bool(data.get("show_progress", False)),
            mqtt_config=mqtt_config,
        )
