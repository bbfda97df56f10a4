# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

LOCK_WAIT_BUCKETS = (0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5)
REQUEST_BUCKETS = (0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0)


@dataclass(slots=True)
class ServiceMetrics:
    registry: CollectorRegistry
    acquire_total: Counter
    release_total: Counter
    pool_free: Gauge
    pool_held: Gauge
    lock_wait_seconds: Histogram
    request_total: Counter
    request_latency: Histogram

    def set_pool(self, *, free: int, held: int) -> None:
        self.pool_free.set(free)
        self.pool_held.set(held)


def _build_histogram(
    namespace: str, name: str, documentation: str, *, registry: CollectorRegistry, buckets: Iterable[float]
) -> Histogram:
    return Histogram(
        f"{namespace}_{name}",
        documentation,
        registry=registry,
        buckets=tuple(buckets),
    )


def build_metrics(namespace: str, registry: CollectorRegistry | None = None) -> ServiceMetrics:
    reg = registry or CollectorRegistry()
    acquire_total = Counter(
        f"{namespace}_acquire_total",
        "Address acquisitions grouped by outcome",
        registry=reg,
        labelnames=("outcome",),
    )
    release_total = Counter(
        f"{namespace}_release_total",
        "Address releases grouped by outcome",
        registry=reg,
        labelnames=("outcome",),
    )
    pool_free = Gauge(f"{namespace}_pool_free", "Free address records", registry=reg)
    pool_held = Gauge(f"{namespace}_pool_held", "Address records held by vehicles", registry=reg)
    lock_wait_seconds = _build_histogram(
        namespace,
        "lock_wait_seconds",
        "Time spent waiting for the pool lock",
        registry=reg,
        buckets=LOCK_WAIT_BUCKETS,
    )
    request_total = Counter(
        f"{namespace}_request_total",
        "Total processed requests",
        registry=reg,
        labelnames=("method", "path", "status"),
    )
    request_latency = _build_histogram(
        namespace,
        "request_latency_seconds",
        "HTTP request latency seconds",
        registry=reg,
        buckets=REQUEST_BUCKETS,
    )
    return ServiceMetrics(
        registry=reg,
        acquire_total=acquire_total,
        release_total=release_total,
        pool_free=pool_free,
        pool_held=pool_held,
        lock_wait_seconds=lock_wait_seconds,
        request_total=request_total,
        request_latency=request_latency,
    )


def render_metrics(metrics: ServiceMetrics) -> bytes:
    return generate_latest(metrics.registry)


__all__ = ["ServiceMetrics", "build_metrics", "render_metrics"]
