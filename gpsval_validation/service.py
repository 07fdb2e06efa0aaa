"""
Validator Service - Background batch runner.

Runs one BatchValidator pass on a dedicated thread so the caller (CLI,
UI, control loop) stays responsive, and supports cooperative
cancellation between records.

Threading Model:
- Caller thread: start(), cancel(), wait()
- Worker thread: reads records, runs the batch, calls the sink

Thread Safety:
- cancel() only sets a threading.Event
- summary/error are written once by the worker, read after wait()
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from gpsval_validation.records import ColumnMapping, SurveyRecord, count_records, read_records
from gpsval_validation.sinks import ValidationSink
from gpsval_validation.validator import BatchSummary, BatchValidator

logger = logging.getLogger(__name__)


class ValidatorService:
    """
    Background validation of one record source.

    Usage:
        service = ValidatorService.for_file("survey.csv", sink=TextSink())
        service.start()
        try:
            summary = service.wait()
        except KeyboardInterrupt:
            service.cancel()
            summary = service.wait()
    """

    def __init__(
        self,
        source: Callable[[], Iterable[SurveyRecord]],
        sink: ValidationSink,
        total: Optional[int] = None,
        validator: Optional[BatchValidator] = None,
        name: str = "gpsval-batch",
    ):
        """
        Args:
            source: Zero-argument callable returning the records; called on
                the worker thread so that reading happens off the caller
            sink: Receiver for events and progress
            total: Expected record count (optional)
            validator: BatchValidator to use (default: new instance)
            name: Worker thread name
        """
        self.source = source
        self.sink = sink
        self.total = total
        self.validator = validator or BatchValidator()
        self.name = name

        self._cancel_event = threading.Event()
        self._done_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.summary: Optional[BatchSummary] = None
        self.error: Optional[BaseException] = None

    @classmethod
    def for_file(
        cls,
        path: Union[str, Path],
        sink: ValidationSink,
        columns: ColumnMapping = ColumnMapping(),
        validator: Optional[BatchValidator] = None,
    ) -> "ValidatorService":
        """Service reading a survey CSV file."""
        path = Path(path)
        return cls(
            source=lambda: read_records(path, columns),
            sink=sink,
            total=count_records(path),
            validator=validator,
        )

    def start(self) -> None:
        """Start the worker thread (once)."""
        if self._thread is not None:
            raise RuntimeError("ValidatorService can only be started once")

        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.info(f"Validation started on thread {self.name}")

    def _run(self) -> None:
        try:
            self.summary = self.validator.run(
                self.source(),
                self.sink,
                total=self.total,
                cancel_event=self._cancel_event,
            )
        except Exception as e:
            logger.error("Validation failed", exc_info=e)
            self.error = e
        finally:
            self._done_event.set()

    def cancel(self) -> None:
        """Ask the worker to stop before the next record."""
        logger.info("Validation cancel requested")
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def is_running(self) -> bool:
        return self._thread is not None and not self._done_event.is_set()

    def wait(self, timeout: Optional[float] = None) -> Optional[BatchSummary]:
        """
        Block until the worker finishes.

        Args:
            timeout: Seconds to wait (None waits forever)

        Returns:
            BatchSummary, or None if still running after timeout

        Raises:
            RuntimeError: If the service was never started
            Exception: The worker's failure (e.g. RecordError), re-raised
        """
        if self._thread is None:
            raise RuntimeError("ValidatorService was not started")

        if not self._done_event.wait(timeout=timeout):
            return None

        self._thread.join()
        if self.error is not None:
            raise self.error
        return self.summary
