"""
Batch Validator Module
======================

Bounded Context: Grouping survey records by area and validating each group.

Design:
- Drives the pure fold in accumulator.py over a record sequence
- Forwards events and progress to an injected sink
- Cooperative cancellation between records (threading.Event)
- Immutable summary snapshot at the end (BatchSummary)

Records of one area must be contiguous: a repeated area identifier
after a different one opens a new group.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from gpsval_logging import LogEvent, StructuredLogger, create_logger
from gpsval_validation.accumulator import GroupResult, GroupState, Step, advance, flush
from gpsval_validation.events import EventType, Verdict
from gpsval_validation.records import SurveyRecord
from gpsval_validation.sinks import ValidationSink


@dataclass(frozen=True)
class BatchSummary:
    """
    Immutable statistics snapshot for one batch pass.

    Attributes:
        records_processed: Records consumed before finishing or cancelling
        total_records: Records expected
        groups_validated: Groups that received a sector verdict
        groups_passed: Groups with a valid sector verdict
        invalid_areas: Groups whose area diagonal was invalid
        cancelled: True if the pass stopped early
    """

    records_processed: int = 0
    total_records: int = 0
    groups_validated: int = 0
    groups_passed: int = 0
    invalid_areas: int = 0
    cancelled: bool = False

    @property
    def groups_failed(self) -> int:
        return self.groups_validated - self.groups_passed

    @property
    def all_valid(self) -> bool:
        return not self.cancelled and self.groups_failed == 0

    def __str__(self) -> str:
        status = "cancelled" if self.cancelled else "finished"
        return (
            f"{status}: records={self.records_processed}/{self.total_records}, "
            f"groups={self.groups_validated}, passed={self.groups_passed}, "
            f"failed={self.groups_failed}"
        )


class BatchValidator:
    """
    Validates an ordered sequence of survey records, one area group at a time.

    Usage:
        validator = BatchValidator()
        sink = CollectingSink()
        summary = validator.run(records, sink)

        for line in sink.verdicts:
            print(line)
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        """
        Args:
            logger: Structured logger (default: "validator" component)
        """
        self.logger = logger or create_logger("validator", level=logging.WARNING)

    def run(
        self,
        records: Iterable[SurveyRecord],
        sink: ValidationSink,
        total: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchSummary:
        """
        Consume every record, emitting verdicts and progress to the sink.

        Args:
            records: Records, contiguous per area identifier
            sink: Receiver for events and progress
            total: Expected record count (default: len(records), read
                into a list first when records has no length)
            cancel_event: Checked before each record; when set, the pass
                stops and the open group gets no verdict

        Returns:
            BatchSummary snapshot
        """
        if total is None:
            if not isinstance(records, Sequence):
                records = list(records)
            total = len(records)

        self.logger.info(
            event=LogEvent.BATCH_STARTED,
            message=f"Validating {total} records",
            metadata={'total': total}
        )

        state = GroupState()
        processed = 0
        validated = passed = invalid_areas = 0

        for record in records:
            if cancel_event is not None and cancel_event.is_set():
                summary = BatchSummary(
                    processed, total, validated, passed, invalid_areas, cancelled=True
                )
                self.logger.warning(
                    event=LogEvent.BATCH_CANCELLED,
                    message="Validation cancelled",
                    metadata={'records_processed': processed, 'total': total}
                )
                return summary

            step = advance(state, record)
            state = step.state
            if step.closed is not None:
                validated += 1
                passed += int(step.closed.is_valid)
            if any(event.event_type == EventType.GROUP_STARTED for event in step.events):
                self.logger.debug(
                    event=LogEvent.GROUP_STARTED,
                    message=f"Group [{record.area_id}] started",
                    metadata={'area_id': record.area_id, 'line': record.line_number}
                )
            if any(event.verdict == Verdict.INVALID_AREA for event in step.events):
                invalid_areas += 1
                self.logger.debug(
                    event=LogEvent.GROUP_AREA_INVALID,
                    message=f"Area [{record.area_id}] has invalid coordinates",
                    metadata={'area_id': record.area_id, 'line': record.line_number}
                )
            self._emit(step, sink)

            processed += 1
            sink.progress(processed, max(total, processed))

        step = flush(state)
        if step.closed is not None:
            validated += 1
            passed += int(step.closed.is_valid)
        self._emit(step, sink)

        total = max(total, processed)
        sink.progress(total, total)

        summary = BatchSummary(processed, total, validated, passed, invalid_areas)
        self.logger.info(
            event=LogEvent.BATCH_FINISHED,
            message=str(summary),
            metadata={
                'records_processed': processed,
                'groups_validated': validated,
                'groups_failed': summary.groups_failed,
            }
        )
        return summary

    def _emit(self, step: Step, sink: ValidationSink) -> None:
        if step.closed is not None:
            self._log_result(step.closed)
        for event in step.events:
            sink.publish(event)

    def _log_result(self, result: GroupResult) -> None:
        """Log why a group failed (DEBUG) and the verdict (INFO)."""
        metadata = {
            'area_id': result.area_id,
            'sector_count': result.sector_count,
        }
        if result.outside_sector is not None:
            self.logger.debug(
                event=LogEvent.GROUP_SECTOR_OUTSIDE,
                message=result.detail,
                metadata={**metadata, 'sector_id': result.outside_sector}
            )
        elif result.overlapping_pair is not None:
            self.logger.debug(
                event=LogEvent.GROUP_SECTORS_OVERLAP,
                message=result.detail,
                metadata={**metadata, 'sector_ids': list(result.overlapping_pair)}
            )

        self.logger.info(
            event=LogEvent.GROUP_VALIDATED,
            message=result.verdict.value,
            metadata={**metadata, 'valid': result.is_valid}
        )
