"""
Region Module
=============

Pure planar geometry on a quadrilateral bounded by 4 coordinates.

Design:
- Immutable (frozen dataclass, read-only vertex array)
- Coordinates reordered once at construction into a canonical perimeter walk
- Planar math on raw degrees: x = longitude, y = latitude
- Thread-safe (no mutable state)

Predicates:
- contains(point | region): even-odd ray casting
- contains_all(regions)
- intersects(region): all-pairs perimeter segment test
- overlaps(region): vertex containment either way, or intersection
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from gpsval_geometry.coordinates import Coordinates

VERTEX_COUNT = 4

Point = Tuple[float, float]
Segment = Tuple[Point, Point]


def _total_order(value: float) -> Tuple[int, float, float]:
    """Sort key for a total order on floats: -0.0 before 0.0, NaN after +inf."""
    if math.isnan(value):
        return (1, 0.0, 0.0)
    return (0, value, math.copysign(1.0, value))


def _reverse_order(value: float) -> Tuple[int, float, float]:
    rank, number, sign = _total_order(value)
    return (-rank, -number, -sign)


def order_perimeter(coordinates: Sequence[Coordinates]) -> Tuple[Coordinates, ...]:
    """
    Order coordinates along the path of the perimeter.

    Order:
    1. Minimum longitude (minimum latitude on ties)
    2. Maximum latitude (minimum longitude on ties)
    3. Maximum longitude (maximum latitude on ties)
    4. The remaining coordinate

    Args:
        coordinates: Exactly 4 coordinates, any order

    Returns:
        Tuple of the same 4 coordinates in perimeter order
    """
    remaining = list(coordinates)

    a = min(remaining, key=lambda c: (_total_order(c.longitude), _total_order(c.latitude)))
    remaining.remove(a)

    b = max(remaining, key=lambda c: (_total_order(c.latitude), _reverse_order(c.longitude)))
    remaining.remove(b)

    c = max(remaining, key=lambda c: (_total_order(c.longitude), _total_order(c.latitude)))
    remaining.remove(c)

    return (a, b, c, remaining[0])


def relative_ccw(start: Point, end: Point, point: Point) -> int:
    """
    Orientation of point relative to the segment start -> end.

    Returns:
        1 or -1 for either side of the line, 0 when the point lies on
        the segment itself. Collinear points beyond either end are
        reported as lying to one side so that disjoint collinear
        segments do not intersect.
    """
    x2 = end[0] - start[0]
    y2 = end[1] - start[1]
    px = point[0] - start[0]
    py = point[1] - start[1]

    ccw = px * y2 - py * x2
    if ccw == 0.0:
        # Collinear: project onto the segment
        ccw = px * x2 + py * y2
        if ccw > 0.0:
            px -= x2
            py -= y2
            ccw = px * x2 + py * y2
            if ccw < 0.0:
                ccw = 0.0

    if ccw < 0.0:
        return -1
    if ccw > 0.0:
        return 1
    return 0


def segments_intersect(first: Segment, second: Segment) -> bool:
    """True if two line segments share at least one point (endpoints included)."""
    (p1, p2), (p3, p4) = first, second
    return (
        relative_ccw(p1, p2, p3) * relative_ccw(p1, p2, p4) <= 0
        and relative_ccw(p3, p4, p1) * relative_ccw(p3, p4, p2) <= 0
    )


@dataclass(frozen=True, init=False)
class Region:
    """
    Immutable region bounded by 4 geographical coordinates.

    Coordinates may be supplied in any order; they are kept in the order
    of the perimeter walk (see order_perimeter).

    Attributes:
        coordinates: The 4 vertices in perimeter order

    Raises:
        ValueError: If not given exactly 4 coordinates

    Example:
        >>> region = Region(
        ...     Coordinates(2, 3), Coordinates(0, 0),
        ...     Coordinates(2, 0), Coordinates(0, 3),
        ... )
        >>> region.contains(Coordinates(1, 1))
        True
    """

    coordinates: Tuple[Coordinates, ...]

    def __init__(self, *coordinates: Coordinates):
        if len(coordinates) != VERTEX_COUNT:
            raise ValueError(
                f"Region must have exactly {VERTEX_COUNT} coordinates, "
                f"got {len(coordinates)}"
            )
        for coordinate in coordinates:
            if not isinstance(coordinate, Coordinates):
                raise TypeError(
                    f"Region vertices must be Coordinates, got {type(coordinate)}"
                )

        ordered = order_perimeter(coordinates)
        object.__setattr__(self, 'coordinates', ordered)

        vertices = np.array(
            [(c.longitude, c.latitude) for c in ordered], dtype=np.float64
        )
        vertices.flags.writeable = False
        object.__setattr__(self, '_vertices', vertices)

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[Coordinates]) -> "Region":
        """Create a Region from any iterable of 4 coordinates."""
        return cls(*coordinates)

    @property
    def vertices(self) -> np.ndarray:
        """Read-only (4, 2) array of (longitude, latitude) in perimeter order."""
        return self._vertices

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box as (min_lon, min_lat, max_lon, max_lat)."""
        min_lon, min_lat = self._vertices.min(axis=0)
        max_lon, max_lat = self._vertices.max(axis=0)
        return float(min_lon), float(min_lat), float(max_lon), float(max_lat)

    def segments(self) -> List[Segment]:
        """
        Perimeter sides in order.

        Side i joins vertex i and vertex (i + 1) % 4. Kept as a list so
        that geometrically identical sides are all checked.
        """
        points = [tuple(p) for p in self._vertices.tolist()]
        return [
            (points[i], points[(i + 1) % VERTEX_COUNT])
            for i in range(VERTEX_COUNT)
        ]

    def contains(self, other: Union[Coordinates, "Region"]) -> bool:
        """
        Check containment of a point or of a whole region.

        A region is contained when all of its vertices are contained.

        Args:
            other: Coordinates or Region to test

        Returns:
            True if inside this region's boundary
        """
        if isinstance(other, Region):
            return all(self.contains_point(c) for c in other.coordinates)
        return self.contains_point(other)

    def contains_all(self, regions: Iterable["Region"]) -> bool:
        """True if every given region is fully contained (True when empty)."""
        return all(self.contains(region) for region in regions)

    def contains_point(self, point: Coordinates) -> bool:
        """
        Even-odd ray casting test for a single point.

        Casts a ray towards increasing longitude and counts the edges it
        crosses. Horizontal edges never count. Points exactly on the
        boundary may land on either side.

        Args:
            point: Coordinates to test

        Returns:
            True if the crossing count is odd
        """
        px, py = point.longitude, point.latitude

        # Edge i runs from vertex i - 1 to vertex i
        previous = np.roll(self._vertices, 1, axis=0).tolist()
        hits = sum(
            1
            for (last_x, last_y), (cur_x, cur_y) in zip(previous, self._vertices.tolist())
            if self._crosses(px, py, last_x, last_y, cur_x, cur_y)
        )
        return (hits & 1) != 0

    @staticmethod
    def _crosses(
        px: float, py: float,
        last_x: float, last_y: float,
        cur_x: float, cur_y: float,
    ) -> bool:
        """Whether a ray from (px, py) towards +x crosses edge last -> cur."""
        if cur_y == last_y:
            return False

        if cur_x < last_x:
            if px >= last_x:
                return False
            left_x = cur_x
        else:
            if px >= cur_x:
                return False
            left_x = last_x

        if cur_y < last_y:
            if py < cur_y or py >= last_y:
                return False
            origin_x, origin_y = cur_x, cur_y
        else:
            if py < last_y or py >= cur_y:
                return False
            origin_x, origin_y = last_x, last_y

        if px < left_x:
            return True

        # px - x(py) < 0 without dividing by dy; flip when dy is negative
        dx = last_x - cur_x
        dy = last_y - cur_y
        cross = (px - origin_x) * dy - (py - origin_y) * dx
        return cross < 0.0 if dy > 0.0 else cross > 0.0

    def _bounds_disjoint(self, other: "Region") -> bool:
        """True if the bounding boxes are strictly apart (no shared point)."""
        low = np.maximum(self._vertices.min(axis=0), other._vertices.min(axis=0))
        high = np.minimum(self._vertices.max(axis=0), other._vertices.max(axis=0))
        return bool(np.any(low > high))

    def intersects(self, other: "Region") -> bool:
        """
        Check if any perimeter side crosses or touches a side of other.

        Args:
            other: Region to test against

        Returns:
            True on the first intersecting pair of sides
        """
        if self._bounds_disjoint(other):
            return False
        other_segments = other.segments()
        return any(
            segments_intersect(side, other_side)
            for side in self.segments()
            for other_side in other_segments
        )

    def overlaps(self, other: "Region") -> bool:
        """
        Check if two regions overlap.

        Regions overlap when either one contains a vertex of the other,
        or when their perimeters intersect.
        """
        if self._bounds_disjoint(other):
            return False
        if any(self.contains_point(c) for c in other.coordinates):
            return True
        if any(other.contains_point(c) for c in self.coordinates):
            return True
        return self.intersects(other)

    def __str__(self) -> str:
        return "Region[" + ", ".join(str(c) for c in self.coordinates) + "]"
