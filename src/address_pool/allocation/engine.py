"""Address allocation engine guarding the pool invariants."""
from __future__ import annotations

import logging
import random
import threading
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Mapping

from address_pool.domain.address import AddressRecord, Coordinate, PostalAddress, same_coordinate
from address_pool.domain.shared.errors import PoolExhausted
from address_pool.infrastructure.monitoring.metrics import ServiceMetrics

from .contracts import AddressRecordStore, PoolStats, SeedReport
from .seeding import validate_entries

logger = logging.getLogger(__name__)


class FreeIndex:
    """Set of free record ids supporting O(1) add, discard and random draw."""

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._items: List[int] = []
        self._positions: Dict[int, int] = {}
        for record_id in ids:
            self.add(record_id)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._positions

    def add(self, record_id: int) -> None:
        if record_id in self._positions:
            return
        self._positions[record_id] = len(self._items)
        self._items.append(record_id)

    def discard(self, record_id: int) -> None:
        position = self._positions.pop(record_id, None)
        if position is None:
            return
        last = self._items.pop()
        if last != record_id:
            self._items[position] = last
            self._positions[last] = position

    def draw(self, rng: random.Random) -> int:
        return self._items[rng.randrange(len(self._items))]


class AddressAllocationEngine:
    """Assign pool addresses to vehicles, one address per vehicle.

    The engine owns an in-memory view of the pool (records by id, a holder
    index and a free index) and writes every transition through to the
    record store before updating that view. ``acquire`` and ``release`` run
    under a single pool-wide lock, so looking up the caller's holding,
    drawing a free record and claiming it happen as one step.
    """

    def __init__(
        self,
        *,
        store: AddressRecordStore,
        rng: random.Random | None = None,
        metrics: ServiceMetrics | None = None,
    ) -> None:
        self._store = store
        self._rng = rng or random.Random()
        self._metrics = metrics
        self._lock = threading.Lock()
        self._records: Dict[int, AddressRecord] = {}
        self._holders: Dict[Hashable, int] = {}
        self._free = FreeIndex()
        self.reload()

    # ---------------- queries ----------------
    def stats(self) -> PoolStats:
        with self._lock:
            return self._stats_locked()

    def holding(self, vehicle_id: Hashable) -> AddressRecord | None:
        with self._lock:
            return self._held_by(vehicle_id)

    # ---------------- operations ----------------
    def acquire(self, vehicle_id: Hashable, lat: float, lon: float) -> AddressRecord:
        """Return the record bound to ``vehicle_id`` at ``(lat, lon)``.

        Callers validate the coordinate range beforehand. A vehicle that
        asks again with exactly the same coordinate gets its current record
        back untouched; otherwise its holding is released first and a free
        record is drawn uniformly at random (possibly the one just released).

        Raises:
            PoolExhausted: no free record remains.
        """

        coordinate = Coordinate(float(lat), float(lon))
        with self._guard():
            current = self._held_by(vehicle_id)
            if current is not None and same_coordinate(current.holder_coordinate, coordinate):
                self._count("acquire_total", "reused")
                logger.debug(
                    "allocation.reused",
                    extra={"vehicle_id": vehicle_id, "record_id": current.id},
                )
                return current

            if current is not None:
                self._transition(current, current.freed())

            if not self._free:
                self._count("acquire_total", "exhausted")
                logger.warning(
                    "allocation.exhausted",
                    extra={"vehicle_id": vehicle_id, "pool_size": len(self._records)},
                )
                raise PoolExhausted(vehicle_id, len(self._records))

            selected = self._records[self._free.draw(self._rng)]
            try:
                claimed = self._transition(selected, selected.held_by(vehicle_id, coordinate))
            except Exception:
                if current is not None:
                    # put the vehicle back on the record it held before the move
                    self._transition(current.freed(), current)
                logger.error(
                    "allocation.claim_failed",
                    extra={"vehicle_id": vehicle_id, "record_id": selected.id},
                )
                raise
            self._count("acquire_total", "assigned")
            logger.info(
                "allocation.assigned",
                extra={
                    "vehicle_id": vehicle_id,
                    "record_id": claimed.id,
                    "previous_record_id": current.id if current is not None else None,
                },
            )
            return claimed

    def release(self, vehicle_id: Hashable) -> bool:
        """Free the record held by ``vehicle_id``; ``False`` when it holds none."""

        with self._guard():
            current = self._held_by(vehicle_id)
            if current is None:
                self._count("release_total", "not_found")
                return False
            self._transition(current, current.freed())
            self._count("release_total", "released")
            logger.info("allocation.released", extra={"vehicle_id": vehicle_id, "record_id": current.id})
            return True

    def seed(self, entries: Iterable[PostalAddress | Mapping[str, Any]]) -> SeedReport:
        """Bulk-load unallocated records; invalid entries are skipped and reported."""

        valid, skipped = validate_entries(entries)
        inserted = self._store.insert_many(valid) if valid else []
        self.reload()
        report = SeedReport(loaded=len(inserted), skipped=skipped)
        logger.info(
            "pool.seeded",
            extra={"loaded": report.loaded, "skipped": report.skipped_count, "total": len(self._records)},
        )
        return report

    def reload(self) -> None:
        """Rebuild the in-memory indices from the record store.

        Stored records are classified by the coordinate sentinel test, not
        by the holder field alone. Records whose holder and coordinate
        disagree, or whose holder already holds another record, are reset to
        free and written back.
        """

        with self._lock:
            self._records = {}
            self._holders = {}
            self._free = FreeIndex()
            repairs: List[AddressRecord] = []
            for record in self._store.list_all():
                if record.is_held and record.holder_id not in self._holders:
                    self._holders[record.holder_id] = record.id
                    self._records[record.id] = record
                    continue
                if record.holder_id is not None or not record.is_coherent:
                    record = record.freed()
                    repairs.append(record)
                self._records[record.id] = record
                self._free.add(record.id)
            for record in repairs:
                self._store.update(record)
                logger.warning("pool.record_repaired", extra={"record_id": record.id})
            self._publish_pool()

    # ---------------- internals ----------------
    @contextmanager
    def _guard(self) -> Iterator[None]:
        started = perf_counter()
        with self._lock:
            if self._metrics is not None:
                self._metrics.lock_wait_seconds.observe(perf_counter() - started)
            yield

    def _held_by(self, vehicle_id: Hashable) -> AddressRecord | None:
        record_id = self._holders.get(vehicle_id)
        if record_id is None:
            return None
        return self._records[record_id]

    def _transition(self, before: AddressRecord, after: AddressRecord) -> AddressRecord:
        # Store first: a failed write leaves the in-memory view untouched.
        self._store.update(after)
        self._records[after.id] = after
        if before.holder_id is not None:
            self._holders.pop(before.holder_id, None)
        if after.is_held:
            self._holders[after.holder_id] = after.id
            self._free.discard(after.id)
        else:
            self._free.add(after.id)
        self._publish_pool()
        return after

    def _stats_locked(self) -> PoolStats:
        free = len(self._free)
        return PoolStats(total=len(self._records), free=free, held=len(self._records) - free)

    def _publish_pool(self) -> None:
        if self._metrics is None:
            return
        stats = self._stats_locked()
        self._metrics.set_pool(free=stats.free, held=stats.held)

    def _count(self, name: str, outcome: str) -> None:
        if self._metrics is None:
            return
        getattr(self._metrics, name).labels(outcome=outcome).inc()


__all__ = ["AddressAllocationEngine", "FreeIndex"]
