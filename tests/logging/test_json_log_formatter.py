from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

from address_pool.core.clock import FrozenClock
from address_pool.infrastructure.monitoring.logging_adapter import JsonLogFormatter, correlation_id_var


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("address_pool.allocation.engine", logging.INFO, __file__, 1, "allocation.assigned", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extras_and_correlation() -> None:
    clock = FrozenClock(datetime(2024, 5, 1, 8, 30, tzinfo=UTC))
    formatter = JsonLogFormatter(clock=clock, service_name="address-pool")
    token = correlation_id_var.set("req-1")
    try:
        payload = json.loads(formatter.format(_record(vehicle_id=7, record_id=3)))
    finally:
        correlation_id_var.reset(token)

    assert payload == {
        "ts": "2024-05-01T08:30:00+00:00",
        "level": "INFO",
        "logger": "address_pool.allocation.engine",
        "msg": "allocation.assigned",
        "correlation_id": "req-1",
        "service": "address-pool",
        "vehicle_id": 7,
        "record_id": 3,
    }


def test_formatter_includes_exception_text() -> None:
    formatter = JsonLogFormatter(clock=FrozenClock())
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    payload = json.loads(formatter.format(record))
    assert payload["correlation_id"] == ""
    assert "RuntimeError: boom" in payload["exc"]
