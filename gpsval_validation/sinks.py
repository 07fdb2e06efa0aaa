"""
Validation Sinks
================

Receivers for validation events and progress.

Design:
- ValidationSink protocol: publish(event) + progress(completed, total)
- Sinks are called from whichever thread drives the batch; marshaling
  onto another thread is the sink's business
- TextSink writes the classic status-line report
- CollectingSink keeps everything in memory (tests, embedding)
- MultiSink fans out to several sinks
"""

import sys
from typing import List, Optional, Protocol, TextIO, Tuple

from gpsval_validation.events import EventType, ValidationEvent


class ValidationSink(Protocol):
    """Protocol for validation output receivers (interface)."""

    def publish(self, event: ValidationEvent) -> None:
        """Receive one event."""
        ...

    def progress(self, completed: int, total: int) -> None:
        """Receive a progress update (records processed, total records)."""
        ...


def progress_fraction(completed: int, total: int) -> float:
    """Fraction in [0, 1]; an empty batch counts as complete."""
    if total <= 0:
        return 1.0
    return min(max(completed / total, 0.0), 1.0)


class TextSink:
    """
    Writes status lines to a text stream.

    Output per group:

        <blank line>
        Area ID = <id>
        <area verdict>
        <sectors verdict>

    Args:
        stream: Output stream (default: sys.stdout)
        show_progress: Also write "Progress: NN%" lines
    """

    def __init__(self, stream: Optional[TextIO] = None, show_progress: bool = False):
        self.stream = stream if stream is not None else sys.stdout
        self.show_progress = show_progress
        self._last_percent: Optional[int] = None

    def write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def publish(self, event: ValidationEvent) -> None:
        if event.event_type == EventType.GROUP_STARTED:
            self.write("")
            self.write(f"Area ID = {event.area_id}")
        else:
            self.write(event.text)

    def progress(self, completed: int, total: int) -> None:
        if not self.show_progress:
            return
        percent = int(progress_fraction(completed, total) * 100)
        if percent != self._last_percent:
            self._last_percent = percent
            self.write(f"Progress: {percent}%")


class CollectingSink:
    """
    Keeps events and progress updates in memory.

    Attributes:
        events: Every published event, in order
        updates: Every (completed, total) progress pair, in order
    """

    def __init__(self):
        self.events: List[ValidationEvent] = []
        self.updates: List[Tuple[int, int]] = []

    def publish(self, event: ValidationEvent) -> None:
        self.events.append(event)

    def progress(self, completed: int, total: int) -> None:
        self.updates.append((completed, total))

    @property
    def verdicts(self) -> List[str]:
        """Verdict lines only, in order."""
        return [event.text for event in self.events if event.is_verdict]

    def verdicts_for(self, area_id: str) -> List[str]:
        return [
            event.text for event in self.events
            if event.is_verdict and event.area_id == area_id
        ]

    def clear(self) -> None:
        self.events.clear()
        self.updates.clear()

    def __len__(self) -> int:
        return len(self.events)

    def __repr__(self) -> str:
        return f"CollectingSink(events={len(self.events)}, updates={len(self.updates)})"


class MultiSink:
    """Forwards every call to each of the given sinks, in order."""

    def __init__(self, *sinks: ValidationSink):
        self.sinks = list(sinks)

    def publish(self, event: ValidationEvent) -> None:
        for sink in self.sinks:
            sink.publish(event)

    def progress(self, completed: int, total: int) -> None:
        for sink in self.sinks:
            sink.progress(completed, total)
