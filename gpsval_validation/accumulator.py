"""
Group Accumulator Module
========================

Pure fold over survey records, grouped by area identifier.

Design:
- GroupState is an immutable accumulator (area_id, area, sectors)
- advance() consumes one record, returns new state + emitted events
- flush() validates the last open group
- validate_group() applies containment then pairwise overlap checks
- No I/O, no logging: the batch validator reports what comes out

State machine:
    NoActiveGroup   area_id is None
    ActiveGroup     area_id set, area is an Area or None (invalid diagonal)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from gpsval_geometry import Area, Sector, is_valid_diagonal
from gpsval_validation.events import EventType, ValidationEvent, Verdict
from gpsval_validation.records import SurveyRecord


@dataclass(frozen=True)
class GroupResult:
    """
    Outcome of validating one group.

    Attributes:
        area_id: Area the group belongs to
        verdict: VALID_SECTORS or INVALID_SECTORS
        sector_count: Number of sectors in the group
        missing_area: True when the area diagonal was invalid
        outside_sector: First sector not contained by the area
        overlapping_pair: First (i < j) pair of overlapping sectors
    """

    area_id: str
    verdict: Verdict
    sector_count: int = 0
    missing_area: bool = False
    outside_sector: Optional[str] = None
    overlapping_pair: Optional[Tuple[str, str]] = None

    @property
    def is_valid(self) -> bool:
        return self.verdict == Verdict.VALID_SECTORS

    @property
    def detail(self) -> Optional[str]:
        """Reason for an invalid verdict."""
        if self.missing_area:
            return f"Area [{self.area_id}] has invalid coordinates"
        if self.outside_sector is not None:
            return (
                f"Area [{self.area_id}] does not fully contain "
                f"Sector [{self.outside_sector}]"
            )
        if self.overlapping_pair is not None:
            first, second = self.overlapping_pair
            return (
                f"Sector [{first}] overlaps Sector [{second}] "
                f"in Area [{self.area_id}]"
            )
        return None

    def to_event(self) -> ValidationEvent:
        return ValidationEvent(
            area_id=self.area_id,
            event_type=EventType.SECTORS_CHECKED,
            verdict=self.verdict,
            detail=self.detail,
        )


def validate_group(
    area_id: str,
    area: Optional[Area],
    sectors: Sequence[Sector],
) -> GroupResult:
    """
    Check that every sector lies inside the area and no two sectors overlap.

    Checks stop at the first failure: sectors are tested for containment
    in order, then pairs (i, j) with i < j in ascending order.

    Args:
        area_id: Area identifier (reporting)
        area: Area geometry, or None if its diagonal was invalid
        sectors: Sectors in accumulation order

    Returns:
        GroupResult with the verdict and the first failure found
    """
    count = len(sectors)

    if area is None:
        return GroupResult(
            area_id, Verdict.INVALID_SECTORS, count, missing_area=True
        )

    for sector in sectors:
        if not area.contains(sector):
            return GroupResult(
                area_id, Verdict.INVALID_SECTORS, count,
                outside_sector=sector.sector_id,
            )

    for i in range(count):
        for j in range(i + 1, count):
            if sectors[i].overlaps(sectors[j]):
                return GroupResult(
                    area_id, Verdict.INVALID_SECTORS, count,
                    overlapping_pair=(sectors[i].sector_id, sectors[j].sector_id),
                )

    return GroupResult(area_id, Verdict.VALID_SECTORS, count)


@dataclass(frozen=True)
class GroupState:
    """
    Immutable accumulator threaded through the batch fold.

    Attributes:
        area_id: Current group key (None before the first record)
        area: Current area, None when the diagonal was invalid
        sectors: Sectors accumulated for the current group
    """

    area_id: Optional[str] = None
    area: Optional[Area] = None
    sectors: Tuple[Sector, ...] = field(default_factory=tuple)

    @property
    def is_active(self) -> bool:
        return self.area_id is not None

    def close(self) -> GroupResult:
        """Validate the accumulated group."""
        return validate_group(self.area_id, self.area, self.sectors)


@dataclass(frozen=True)
class Step:
    """
    Output of one fold step.

    Attributes:
        state: Accumulator after the step
        events: Events to emit, in order
        closed: Result of the group closed by this step, if any
    """

    state: GroupState
    events: List[ValidationEvent]
    closed: Optional[GroupResult] = None


def start_group(record: SurveyRecord) -> Tuple[GroupState, List[ValidationEvent]]:
    """Open a group for the record's area and check its diagonal."""
    area_id = record.area_id
    c1, c2 = record.area_corners
    events = [ValidationEvent(area_id, EventType.GROUP_STARTED)]

    if is_valid_diagonal(c1, c2):
        area = Area.from_diagonal(area_id, c1, c2)
        events.append(
            ValidationEvent(area_id, EventType.AREA_CHECKED, Verdict.VALID_AREA)
        )
    else:
        area = None
        events.append(
            ValidationEvent(
                area_id, EventType.AREA_CHECKED, Verdict.INVALID_AREA,
                detail=f"Corners {c1} and {c2} share a latitude or longitude",
            )
        )

    return GroupState(area_id=area_id, area=area), events


def advance(state: GroupState, record: SurveyRecord) -> Step:
    """
    Consume one record.

    A change of area identifier closes the active group (emitting its
    verdict) and opens a new one. The record's sector is always
    accumulated, even when the area diagonal was invalid.
    """
    events: List[ValidationEvent] = []
    closed = None

    if not state.is_active or record.area_id != state.area_id:
        if state.is_active:
            closed = state.close()
            events.append(closed.to_event())
        state, opened = start_group(record)
        events.extend(opened)

    sector = Sector.from_corners(record.sector_id, *record.sector_corners)
    state = GroupState(
        area_id=state.area_id,
        area=state.area,
        sectors=state.sectors + (sector,),
    )
    return Step(state=state, events=events, closed=closed)


def flush(state: GroupState) -> Step:
    """Validate the last open group after the final record."""
    if not state.is_active:
        return Step(state=GroupState(), events=[])

    closed = state.close()
    return Step(state=GroupState(), events=[closed.to_event()], closed=closed)
