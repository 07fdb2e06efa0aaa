"""
Survey Records Module
=====================

Typed input rows for the batch validator, and the CSV source that
produces them.

Design:
- SurveyRecord: immutable, already-typed row (no parsing in the core)
- ColumnMapping: header names, overridable from config
- read_records(): lazy generator over a CSV file with a header row
- RecordError names the offending line and column
"""

import csv
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from gpsval_geometry import Coordinates


class RecordError(ValueError):
    """Raised when a source row is missing a column or holds a bad value."""


@dataclass(frozen=True)
class ColumnMapping:
    """
    Header names of the survey CSV columns.

    Defaults match the survey export format: area corners as
    ALat1/ALon1/ALat2/ALon2, sector latitudes c1..c4 and sector
    longitudes d1..d4.
    """

    area_id: str = "AreaID"
    area_lat1: str = "ALat1"
    area_lon1: str = "ALon1"
    area_lat2: str = "ALat2"
    area_lon2: str = "ALon2"
    sector_id: str = "SectorID"
    sector_lat1: str = "c1"
    sector_lon1: str = "d1"
    sector_lat2: str = "c2"
    sector_lon2: str = "d2"
    sector_lat3: str = "c3"
    sector_lon3: str = "d3"
    sector_lat4: str = "c4"
    sector_lon4: str = "d4"

    def __post_init__(self):
        names = [getattr(self, f.name) for f in fields(self)]
        if any(not name for name in names):
            raise ValueError("Column names cannot be empty")
        if len(set(names)) != len(names):
            raise ValueError(f"Column names must be unique, got {names}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, str]]) -> "ColumnMapping":
        """Build a mapping from partial overrides, e.g. {'area_id': 'Zone'}."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown column keys: {sorted(unknown)}")
        return cls(**{key: str(value) for key, value in data.items()})

    def headers(self) -> Tuple[str, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True)
class SurveyRecord:
    """
    One input row: an area definition plus one of its sectors.

    Attributes:
        area_id: Area identifier (group key)
        area_corners: 2 diagonal corners of the area
        sector_id: Sector identifier
        sector_corners: 4 corners of the sector, any order
        line_number: 1-based source line (0 when not read from a file)
    """

    area_id: str
    area_corners: Tuple[Coordinates, Coordinates]
    sector_id: str
    sector_corners: Tuple[Coordinates, Coordinates, Coordinates, Coordinates]
    line_number: int = 0

    def __post_init__(self):
        if len(self.area_corners) != 2:
            raise ValueError(
                f"Record needs 2 area corners, got {len(self.area_corners)}"
            )
        if len(self.sector_corners) != 4:
            raise ValueError(
                f"Record needs 4 sector corners, got {len(self.sector_corners)}"
            )

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, str],
        columns: ColumnMapping = ColumnMapping(),
        line_number: int = 0,
    ) -> "SurveyRecord":
        """
        Convert a raw text row (header -> value) to a typed record.

        Raises:
            RecordError: If a column is missing or a coordinate is not a number
        """
        def text(column: str) -> str:
            value = row.get(column)
            if value is None:
                raise RecordError(
                    f"Line {line_number}: missing column '{column}'"
                )
            return value.strip()

        def number(column: str) -> float:
            value = text(column)
            try:
                return float(value)
            except ValueError:
                raise RecordError(
                    f"Line {line_number}: column '{column}' is not a number: {value!r}"
                ) from None

        def corner(lat_column: str, lon_column: str) -> Coordinates:
            return Coordinates(number(lat_column), number(lon_column))

        c = columns
        return cls(
            area_id=text(c.area_id),
            area_corners=(
                corner(c.area_lat1, c.area_lon1),
                corner(c.area_lat2, c.area_lon2),
            ),
            sector_id=text(c.sector_id),
            sector_corners=(
                corner(c.sector_lat1, c.sector_lon1),
                corner(c.sector_lat2, c.sector_lon2),
                corner(c.sector_lat3, c.sector_lon3),
                corner(c.sector_lat4, c.sector_lon4),
            ),
            line_number=line_number,
        )


def read_records(
    path: Union[str, Path],
    columns: ColumnMapping = ColumnMapping(),
) -> Iterator[SurveyRecord]:
    """
    Read survey records from a CSV file whose first row is the header.

    Rows are yielded lazily in file order. Blank lines are skipped.

    Args:
        path: CSV file path
        columns: Header names to read

    Yields:
        SurveyRecord per data row

    Raises:
        FileNotFoundError: If the file does not exist
        RecordError: If the header lacks a column or a row is malformed
    """
    path = Path(path)
    with open(path, newline='') as f:
        reader = csv.DictReader(f)

        header = reader.fieldnames or []
        missing = [name for name in columns.headers() if name not in header]
        if missing:
            raise RecordError(f"{path}: header is missing columns {missing}")

        for row in reader:
            yield SurveyRecord.from_row(row, columns, line_number=reader.line_num)


def count_records(path: Union[str, Path]) -> int:
    """Count data rows (header excluded) for progress reporting."""
    with open(Path(path), newline='') as f:
        reader = csv.reader(f)
        rows = sum(1 for row in reader if row)
    return max(rows - 1, 0)


def records_from_dicts(
    rows: Iterable[Mapping[str, str]],
    columns: ColumnMapping = ColumnMapping(),
) -> List[SurveyRecord]:
    """Convert in-memory header->value rows to records (line numbers from 2)."""
    return [
        SurveyRecord.from_row(row, columns, line_number=index + 2)
        for index, row in enumerate(rows)
    ]
