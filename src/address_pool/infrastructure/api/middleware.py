# -*- coding: utf-8 -*-
from __future__ import annotations

from time import perf_counter

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from address_pool.infrastructure.monitoring.metrics import ServiceMetrics


class MetricsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, metrics: ServiceMetrics) -> None:  # type: ignore[override]
        super().__init__(app)
        self._metrics = metrics

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        started = perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        path = getattr(route, "path", "unmatched")
        self._metrics.request_total.labels(
            method=request.method.upper(), path=path, status=str(response.status_code)
        ).inc()
        self._metrics.request_latency.observe(perf_counter() - started)
        return response
