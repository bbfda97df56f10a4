"""Address records and the coordinate encoding of their allocation state.

A record is *held* exactly when it carries a holder id and an in-range
coordinate. Free records carry :data:`UNALLOCATED`, a coordinate that lies
outside the valid latitude/longitude ranges, so the allocation state can be
read from the coordinate alone.
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass, replace
from typing import Hashable, NamedTuple, Optional

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


class Coordinate(NamedTuple):
    """Latitude/longitude pair in degrees, compared exactly."""

    lat: float
    lon: float


UNALLOCATED = Coordinate(MAX_LATITUDE + 1, MAX_LONGITUDE + 1)


def latitude_is_valid(lat: Optional[float]) -> bool:
    if lat is None or isinstance(lat, bool):
        return False
    try:
        value = float(lat)
    except (TypeError, ValueError):
        return False
    return not math.isnan(value) and MIN_LATITUDE <= value <= MAX_LATITUDE


def longitude_is_valid(lon: Optional[float]) -> bool:
    if lon is None or isinstance(lon, bool):
        return False
    try:
        value = float(lon)
    except (TypeError, ValueError):
        return False
    return not math.isnan(value) and MIN_LONGITUDE <= value <= MAX_LONGITUDE


def coordinate_is_valid(coordinate: Coordinate) -> bool:
    return latitude_is_valid(coordinate.lat) and longitude_is_valid(coordinate.lon)


def same_coordinate(left: Coordinate, right: Coordinate) -> bool:
    """Bitwise equality; unlike ``==`` it tells ``-0.0`` from ``0.0``."""

    return struct.pack("<2d", *left) == struct.pack("<2d", *right)


@dataclass(frozen=True)
class PostalAddress:
    """Descriptive postal fields; never mutated after seeding."""

    address: str
    city: str
    state: str
    zip: str

    def as_dict(self) -> dict[str, str]:
        return {"address": self.address, "city": self.city, "state": self.state, "zip": self.zip}


@dataclass(frozen=True)
class AddressRecord:
    """Immutable snapshot of one pool entry."""

    id: int
    postal: PostalAddress
    holder_coordinate: Coordinate = UNALLOCATED
    holder_id: Hashable | None = None

    @property
    def is_held(self) -> bool:
        return self.holder_id is not None and coordinate_is_valid(self.holder_coordinate)

    @property
    def is_coherent(self) -> bool:
        """True when holder presence and coordinate validity agree."""

        return (self.holder_id is not None) == coordinate_is_valid(self.holder_coordinate)

    def held_by(self, vehicle_id: Hashable, coordinate: Coordinate) -> "AddressRecord":
        return replace(self, holder_id=vehicle_id, holder_coordinate=Coordinate(*coordinate))

    def freed(self) -> "AddressRecord":
        return replace(self, holder_id=None, holder_coordinate=UNALLOCATED)
