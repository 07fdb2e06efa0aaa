"""
gpsval_validation - Batch validation of survey areas and sectors.

Groups contiguous survey records by area identifier and checks, per
group, that every sector lies inside the area and that no two sectors
overlap.

Architecture:
- records: SurveyRecord, ColumnMapping, CSV source
- events: Verdict, EventType, ValidationEvent
- accumulator: pure fold (GroupState, advance, flush, validate_group)
- validator: BatchValidator (drives the fold, sink + progress + cancel)
- sinks: ValidationSink protocol, TextSink, CollectingSink, MultiSink
- service: ValidatorService (background thread)
- config: ValidatorConfig, MQTTConfig (YAML)
"""

from gpsval_validation.records import (
    ColumnMapping,
    RecordError,
    SurveyRecord,
    count_records,
    read_records,
    records_from_dicts,
)
from gpsval_validation.events import EventType, ValidationEvent, Verdict
from gpsval_validation.accumulator import (
    GroupResult,
    GroupState,
    Step,
    advance,
    flush,
    validate_group,
)
from gpsval_validation.sinks import (
    CollectingSink,
    MultiSink,
    TextSink,
    ValidationSink,
    progress_fraction,
)
from gpsval_validation.validator import BatchSummary, BatchValidator
from gpsval_validation.service import ValidatorService
from gpsval_validation.config import MQTTConfig, ValidatorConfig

__all__ = [
    "ColumnMapping",
    "RecordError",
    "SurveyRecord",
    "count_records",
    "read_records",
    "records_from_dicts",
    "EventType",
    "ValidationEvent",
    "Verdict",
    "GroupResult",
    "GroupState",
    "Step",
    "advance",
    "flush",
    "validate_group",
    "CollectingSink",
    "MultiSink",
    "TextSink",
    "ValidationSink",
    "progress_fraction",
    "BatchSummary",
    "BatchValidator",
    "ValidatorService",
    "MQTTConfig",
    "ValidatorConfig",
]
