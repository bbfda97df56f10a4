"""Contracts shared by the allocation engine and its record stores."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, List, Protocol, Sequence, Tuple, runtime_checkable

from address_pool.domain.address import AddressRecord, PostalAddress


@runtime_checkable
class AddressRecordStore(Protocol):
    """Keyed storage of address records.

    Implementations return snapshots; mutating a returned record never
    changes stored state.
    """

    def get(self, record_id: int) -> AddressRecord | None:
        """Return the record with ``record_id`` or ``None``."""

    def find_by_holder(self, holder_id: Hashable) -> AddressRecord | None:
        """Return the record currently held by ``holder_id`` or ``None``."""

    def list_all(self) -> List[AddressRecord]:
        """Return every record ordered by id."""

    def list_free(self) -> List[AddressRecord]:
        """Return records without a holder, ordered by id."""

    def insert_many(self, postal: Sequence[PostalAddress]) -> List[AddressRecord]:
        """Insert unallocated records and return them with assigned ids."""

    def update(self, record: AddressRecord) -> AddressRecord:
        """Persist holder fields of an existing record."""

    def count(self) -> int:
        """Return the number of stored records."""


@dataclass(frozen=True)
class PoolStats:
    total: int
    free: int
    held: int


@dataclass(frozen=True)
class SkippedEntry:
    index: int
    reason: str


@dataclass(frozen=True)
class SeedReport:
    """Outcome of a bulk seed."""

    loaded: int
    skipped: Tuple[SkippedEntry, ...] = field(default_factory=tuple)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)
