"""
Geometry Layer
==============

Bounded Context: Planar geometry of survey regions.

Responsibilities:
- Coordinate value type (bit-level equality)
- Quadrilateral regions in canonical perimeter order
- Point/region containment, perimeter intersection, overlap
- Identified survey shapes (Area, Sector)
- NO grouping, NO reporting, NO I/O

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Fail-fast validation
- Zero side effects
"""

from gpsval_geometry.coordinates import Coordinates
from gpsval_geometry.region import Region, order_perimeter, segments_intersect
from gpsval_geometry.shapes import Area, Sector, InvalidAreaError, is_valid_diagonal

__all__ = [
    "Coordinates",
    "Region",
    "order_perimeter",
    "segments_intersect",
    "Area",
    "Sector",
    "InvalidAreaError",
    "is_valid_diagonal",
]
