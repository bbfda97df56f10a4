"""Request/response facade over the allocation engine."""
from __future__ import annotations

import logging
from typing import Hashable

from address_pool.allocation import AddressAllocationEngine, SeedReport, load_initial_data
from address_pool.domain.address import PostalAddress, latitude_is_valid, longitude_is_valid
from address_pool.domain.shared.errors import AddressNotFound, InvalidCoordinate
from address_pool.infrastructure.config.settings import SeedConfig

logger = logging.getLogger(__name__)


class AddressService:
    """Entry point used by the HTTP layer and by vehicle lifecycle callers."""

    def __init__(self, engine: AddressAllocationEngine) -> None:
        self._engine = engine

    def get_address(self, lat: float, lon: float, vehicle_id: Hashable) -> PostalAddress:
        """Return the postal address bound to the vehicle at ``(lat, lon)``.

        Raises:
            InvalidCoordinate: the coordinate is outside the valid ranges.
            PoolExhausted: every address is already held.
        """

        if not latitude_is_valid(lat) or not longitude_is_valid(lon):
            raise InvalidCoordinate(lat, lon)
        return self._engine.acquire(vehicle_id, lat, lon).postal

    def delete_address(self, vehicle_id: Hashable) -> int:
        """Release the vehicle's address and return the number released."""

        if not self._engine.release(vehicle_id):
            raise AddressNotFound(vehicle_id)
        return 1

    def vehicle_count(self) -> int:
        return self._engine.stats().held

    def count(self) -> int:
        return self._engine.stats().total


def bootstrap_pool(engine: AddressAllocationEngine, config: SeedConfig) -> SeedReport | None:
    """Seed an empty pool from the initial-data file.

    A pool that already holds records (e.g. a persistent store after a
    restart) is left untouched.
    """

    if not config.enabled:
        logger.info("pool.seed_disabled")
        return None
    existing = engine.stats().total
    if existing:
        logger.info("pool.seed_skipped", extra={"existing": existing})
        return None
    report = engine.seed(load_initial_data(config.preload_file))
    if report.skipped_count:
        logger.warning(
            "pool.seed_partial",
            extra={"loaded": report.loaded, "skipped": report.skipped_count},
        )
    return report
