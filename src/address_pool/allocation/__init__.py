"""Address allocation public API."""

from .contracts import AddressRecordStore, PoolStats, SeedReport, SkippedEntry
from .engine import AddressAllocationEngine, FreeIndex
from .seeding import PostalAddressPayload, load_initial_data, validate_entries

__all__ = [
    "AddressAllocationEngine",
    "AddressRecordStore",
    "FreeIndex",
    "PoolStats",
    "PostalAddressPayload",
    "SeedReport",
    "SkippedEntry",
    "load_initial_data",
    "validate_entries",
]
