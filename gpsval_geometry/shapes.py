"""
Survey Shapes Module
====================

Identified regions used by survey validation.

Design:
- Tagged wrappers: {identifier, region}, no subclassing of Region
- Area: axis-aligned rectangle from 2 diagonal corners
- Sector: arbitrary quadrilateral from 4 corners
- Fail-fast validation for degenerate area diagonals
"""

from dataclasses import dataclass
from typing import Tuple

from gpsval_geometry.coordinates import Coordinates
from gpsval_geometry.region import Region


class InvalidAreaError(ValueError):
    """Raised when area diagonal corners share a latitude or a longitude."""


def is_valid_diagonal(c1: Coordinates, c2: Coordinates) -> bool:
    """
    Check that two corners span a rectangle with non-zero width and height.

    Args:
        c1: First diagonal corner
        c2: Second diagonal corner

    Returns:
        False if the corners share a latitude or a longitude
    """
    return c1.latitude != c2.latitude and c1.longitude != c2.longitude


@dataclass(frozen=True)
class Area:
    """
    Rectangular survey area (without orientation).

    Attributes:
        area_id: Identifier used for reporting only
        region: Rectangle geometry

    Example:
        >>> area = Area.from_diagonal("Area 1", Coordinates(5, 1), Coordinates(1, 4))
        >>> [str(c) for c in area.coordinates]
        ['(1.0, 1.0)', '(5.0, 1.0)', '(5.0, 4.0)', '(1.0, 4.0)']
    """

    area_id: str
    region: Region

    @classmethod
    def from_diagonal(cls, area_id: str, c1: Coordinates, c2: Coordinates) -> "Area":
        """
        Create an Area from 2 diagonal corners of a rectangle.

        The remaining corners combine the latitude of one corner with
        the longitude of the other.

        Raises:
            InvalidAreaError: If the corners share a latitude or a longitude
        """
        if not is_valid_diagonal(c1, c2):
            raise InvalidAreaError(
                f"Area '{area_id}' corners {c1} and {c2} must differ in "
                f"both latitude and longitude"
            )

        region = Region(
            c1,
            c2,
            Coordinates(c1.latitude, c2.longitude),
            Coordinates(c2.latitude, c1.longitude),
        )
        return cls(area_id=area_id, region=region)

    @property
    def coordinates(self) -> Tuple[Coordinates, ...]:
        return self.region.coordinates

    def contains(self, sector: "Sector") -> bool:
        """True if the sector lies entirely inside this area."""
        return self.region.contains(sector.region)


@dataclass(frozen=True)
class Sector:
    """
    Quadrilateral sector of a survey area.

    Attributes:
        sector_id: Identifier used for reporting only
        region: Quadrilateral geometry
    """

    sector_id: str
    region: Region

    @classmethod
    def from_corners(
        cls,
        sector_id: str,
        c1: Coordinates,
        c2: Coordinates,
        c3: Coordinates,
        c4: Coordinates,
    ) -> "Sector":
        """Create a Sector from 4 corners in any order."""
        return cls(sector_id=sector_id, region=Region(c1, c2, c3, c4))

    @property
    def coordinates(self) -> Tuple[Coordinates, ...]:
        return self.region.coordinates

    def overlaps(self, other: "Sector") -> bool:
        return self.region.overlaps(other.region)
