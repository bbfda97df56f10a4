# -*- coding: utf-8 -*-
from __future__ import annotations

import json
import logging
from contextvars import ContextVar
from typing import Any, Dict
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from address_pool.core.clock import SupportsNow, SystemClock

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def configure_json_logging(
    level: int = logging.INFO, *, clock: SupportsNow | None = None, service_name: str | None = None
) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter(clock=clock, service_name=service_name))
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, clock: SupportsNow | None = None, service_name: str | None = None) -> None:
        super().__init__()
        self._clock = clock or SystemClock()
        self._service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self._clock.now().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": correlation_id_var.get(),
        }
        if self._service_name:
            payload["service"] = self._service_name
        for key, value in record.__dict__.items():
            if key in _RESERVED or key in payload or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        corr = request.headers.get("X-Correlation-ID") or str(uuid4())
        token = correlation_id_var.set(corr)
        try:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = corr
            return response
        finally:
            correlation_id_var.reset(token)


__all__ = ["CorrelationIdMiddleware", "JsonLogFormatter", "configure_json_logging", "correlation_id_var"]
