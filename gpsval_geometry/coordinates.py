"""
Coordinates Module
==================

Geographical latitude/longitude pair as decimal degrees.

Design:
- Immutable value object (frozen dataclass)
- Bit-level equality: two Coordinates are equal only when both fields
  have identical IEEE-754 bit patterns (no epsilon, 0.0 != -0.0)
- No range validation (values outside [-90, 90] / [-180, 180] are accepted)
"""

import struct
from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Coordinates:
    """
    Latitude and longitude in decimal degrees.

    Attributes:
        latitude: Degrees of latitude (y axis in planar tests)
        longitude: Degrees of longitude (x axis in planar tests)

    Example:
        >>> Coordinates(38.8666, -77.1280) == Coordinates(38.8666, -77.1280)
        True
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        object.__setattr__(self, 'latitude', float(self.latitude))
        object.__setattr__(self, 'longitude', float(self.longitude))

    def _bits(self) -> bytes:
        return struct.pack('<dd', self.latitude, self.longitude)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Coordinates):
            return NotImplemented
        return self._bits() == other._bits()

    def __hash__(self) -> int:
        return hash(self._bits())

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"
