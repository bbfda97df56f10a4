"""Clock abstractions for log timestamps.

Runtime code depends on :class:`SupportsNow` instead of calling
``datetime.now`` directly; tests use :class:`FrozenClock`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class SupportsNow(Protocol):
    def now(self) -> datetime:  # pragma: no cover - structural typing
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


@dataclass
class FrozenClock:
    instant: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def now(self) -> datetime:
        return self.instant

    def advance(self, seconds: float) -> None:
        self.instant = self.instant + timedelta(seconds=seconds)


__all__ = ["FrozenClock", "SupportsNow", "SystemClock"]
