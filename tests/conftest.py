"""Shared fixtures for the address pool test-suite."""
from __future__ import annotations

import random

import pytest
from prometheus_client import CollectorRegistry

from address_pool.allocation import AddressAllocationEngine
from address_pool.infrastructure.monitoring.metrics import ServiceMetrics, build_metrics
from address_pool.infrastructure.persistence import (
    InMemoryAddressRecordStore,
    SQLAlchemyAddressRecordStore,
    create_schema,
    make_engine,
    make_session_factory,
)

from tests.factories import make_postal


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def metrics() -> ServiceMetrics:
    return build_metrics("address_pool_test", CollectorRegistry())


@pytest.fixture()
def memory_store() -> InMemoryAddressRecordStore:
    return InMemoryAddressRecordStore()


@pytest.fixture()
def pool(memory_store, rng, metrics) -> AddressAllocationEngine:
    engine = AddressAllocationEngine(store=memory_store, rng=rng, metrics=metrics)
    engine.seed(make_postal(5))
    return engine


@pytest.fixture()
def sql_engine(tmp_path):
    engine = make_engine(f"sqlite+pysqlite:///{tmp_path / 'pool.db'}")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def sql_store(sql_engine) -> SQLAlchemyAddressRecordStore:
    return SQLAlchemyAddressRecordStore(make_session_factory(sql_engine))
