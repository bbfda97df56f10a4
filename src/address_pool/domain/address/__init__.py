from .entities import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    UNALLOCATED,
    AddressRecord,
    Coordinate,
    PostalAddress,
    coordinate_is_valid,
    latitude_is_valid,
    longitude_is_valid,
    same_coordinate,
)

__all__ = [
    "AddressRecord",
    "Coordinate",
    "MAX_LATITUDE",
    "MAX_LONGITUDE",
    "MIN_LATITUDE",
    "MIN_LONGITUDE",
    "PostalAddress",
    "UNALLOCATED",
    "coordinate_is_valid",
    "latitude_is_valid",
    "longitude_is_valid",
    "same_coordinate",
]
