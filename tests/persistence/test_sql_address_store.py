from __future__ import annotations

import random

import pytest
from sqlalchemy import select

from address_pool.allocation import AddressAllocationEngine
from address_pool.domain.address import UNALLOCATED, Coordinate
from address_pool.domain.shared.errors import StoreError
from address_pool.infrastructure.persistence import (
    AddressRecordModel,
    SQLAlchemyAddressRecordStore,
    make_session_factory,
)

from tests.factories import make_postal


def test_insert_many_assigns_ids_and_sentinel(sql_store) -> None:
    created = sql_store.insert_many(make_postal(3))

    assert [record.id for record in created] == [1, 2, 3]
    assert all(record.holder_coordinate == UNALLOCATED for record in created)
    assert sql_store.count() == 3
    assert sql_store.get(2).postal == make_postal(3)[1]
    assert sql_store.get(99) is None


def test_update_and_lookup_by_holder(sql_store) -> None:
    created = sql_store.insert_many(make_postal(2))

    sql_store.update(created[0].held_by(17, Coordinate(10.0, 20.0)))

    held = sql_store.find_by_holder(17)
    assert held.id == created[0].id
    assert held.holder_coordinate == Coordinate(10.0, 20.0)
    assert [record.id for record in sql_store.list_free()] == [created[1].id]

    sql_store.update(held.freed())
    assert sql_store.find_by_holder(17) is None
    assert len(sql_store.list_free()) == 2


def test_unique_holder_is_enforced(sql_store) -> None:
    first, second = sql_store.insert_many(make_postal(2))
    sql_store.update(first.held_by(5, Coordinate(0.0, 0.0)))

    with pytest.raises(StoreError):
        sql_store.update(second.held_by(5, Coordinate(1.0, 1.0)))

    assert sql_store.find_by_holder(5).id == first.id


def test_update_unknown_record_fails(sql_store) -> None:
    (record,) = sql_store.insert_many(make_postal(1))

    with pytest.raises(StoreError):
        sql_store.update(record.__class__(id=404, postal=record.postal))


def test_engine_state_survives_restart(sql_engine) -> None:
    store = SQLAlchemyAddressRecordStore(make_session_factory(sql_engine))
    engine = AddressAllocationEngine(store=store, rng=random.Random(2))
    engine.seed(make_postal(4))
    bound = engine.acquire(8, 51.5, -0.12)
    engine.acquire(9, 40.7, -74.0)
    engine.release(9)

    restarted = AddressAllocationEngine(
        store=SQLAlchemyAddressRecordStore(make_session_factory(sql_engine)),
        rng=random.Random(2),
    )

    assert restarted.stats().total == 4
    assert restarted.stats().held == 1
    assert restarted.acquire(8, 51.5, -0.12) == bound
    assert restarted.holding(9) is None


def test_reload_repairs_rows_written_outside_the_engine(sql_engine, sql_store) -> None:
    sql_store.insert_many(make_postal(2))
    session_factory = make_session_factory(sql_engine)
    with session_factory() as session:
        row = session.execute(select(AddressRecordModel).where(AddressRecordModel.id == 1)).scalar_one()
        row.vehicle_id = 3
        session.commit()

    engine = AddressAllocationEngine(store=sql_store)

    assert engine.stats().free == 2
    assert sql_store.get(1).holder_id is None
