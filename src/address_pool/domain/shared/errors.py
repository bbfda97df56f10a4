# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any, Dict, Hashable


class AllocationError(Exception):
    """Base class for per-request allocation failures."""

    error_code = "ALLOCATION_ERROR"
    status_code = 400

    def __init__(self, message: str, *, details: Dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PoolExhausted(AllocationError):
    error_code = "POOL_EXHAUSTED"
    status_code = 404

    def __init__(self, vehicle_id: Hashable, pool_size: int) -> None:
        super().__init__(
            "No free address is available for the vehicle.",
            details={"vehicle_id": vehicle_id, "pool_size": pool_size},
        )


class AddressNotFound(AllocationError):
    error_code = "ADDRESS_NOT_FOUND"
    status_code = 404

    def __init__(self, vehicle_id: Hashable) -> None:
        super().__init__(
            "The vehicle does not hold an address.",
            details={"vehicle_id": vehicle_id},
        )


class InvalidCoordinate(AllocationError):
    error_code = "INVALID_COORDINATE"
    status_code = 400

    def __init__(self, lat: float | None, lon: float | None) -> None:
        super().__init__(
            "Latitude must be within [-90, 90] and longitude within [-180, 180].",
            details={"lat": lat, "lon": lon},
        )


class SeedDataError(AllocationError):
    """Raised when the initial address data cannot be read at all."""

    error_code = "SEED_DATA_INVALID"
    status_code = 500


class StoreError(AllocationError):
    """Wraps failures of the backing record store."""

    error_code = "STORE_ERROR"
    status_code = 500


__all__ = [
    "AddressNotFound",
    "AllocationError",
    "InvalidCoordinate",
    "PoolExhausted",
    "SeedDataError",
    "StoreError",
]
