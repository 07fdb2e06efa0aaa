"""
Validation Event Schema
=======================

Bounded Context: Validation output data structures

Design:
- Verdict: the 4 fixed status lines (text kept byte-for-byte, including
  the "Succes" spelling consumers already match on)
- EventType: what step of a group produced the event
- ValidationEvent: immutable event handed to sinks, serializable to JSON

Message Flow:
    BatchValidator → ValidationEvent → ValidationSink (text, MQTT, ...)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Verdict(str, Enum):
    """Status lines reported per group."""
    INVALID_AREA = "Error: Invalid Area Coordinates"
    VALID_AREA = "Succes: Area Coordinates Valid"
    INVALID_SECTORS = "Error: A sector is outside the area or overlaps with another sector"
    VALID_SECTORS = "Success: All sectors within area and clear of overlap"

    @property
    def is_valid(self) -> bool:
        return self in (Verdict.VALID_AREA, Verdict.VALID_SECTORS)


class EventType(str, Enum):
    """Group step that produced an event."""
    GROUP_STARTED = "group_started"    # New area identifier seen
    AREA_CHECKED = "area_checked"      # Area diagonal checked
    SECTORS_CHECKED = "sectors_checked"  # Containment + overlap checked


@dataclass(frozen=True)
class ValidationEvent:
    """
    Immutable event emitted by the batch validator.

    Attributes:
        area_id: Area the event belongs to
        event_type: Group step
        verdict: Status line (None for GROUP_STARTED)
        detail: Optional human-readable reason (failing sector or pair)

    Example:
        >>> event = ValidationEvent("A1", EventType.AREA_CHECKED, Verdict.VALID_AREA)
        >>> event.text
        'Succes: Area Coordinates Valid'
    """

    area_id: str
    event_type: EventType
    verdict: Optional[Verdict] = None
    detail: Optional[str] = None

    def __post_init__(self):
        if self.event_type == EventType.GROUP_STARTED:
            if self.verdict is not None:
                raise ValueError("GROUP_STARTED events carry no verdict")
        elif self.verdict is None:
            raise ValueError(f"{self.event_type.value} events require a verdict")

    @property
    def text(self) -> Optional[str]:
        """Verdict line, or None for GROUP_STARTED."""
        return self.verdict.value if self.verdict is not None else None

    @property
    def is_verdict(self) -> bool:
        return self.verdict is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'area_id': self.area_id,
            'event_type': self.event_type.value,
            'verdict': self.text,
            'valid': self.verdict.is_valid if self.verdict is not None else None,
            'detail': self.detail,
        }
