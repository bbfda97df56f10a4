from __future__ import annotations

import pytest

from address_pool.domain.address import Coordinate
from address_pool.domain.shared.errors import StoreError

from tests.factories import make_postal


def test_holder_lookup_follows_updates(memory_store) -> None:
    first, second = memory_store.insert_many(make_postal(2))

    memory_store.update(first.held_by(7, Coordinate(1.0, 2.0)))
    assert memory_store.find_by_holder(7).id == first.id

    memory_store.update(first.freed())
    memory_store.update(second.held_by(7, Coordinate(3.0, 4.0)))
    assert memory_store.find_by_holder(7).id == second.id
    assert memory_store.get(first.id).holder_id is None

    memory_store.update(second.held_by(8, Coordinate(3.0, 4.0)))
    assert memory_store.find_by_holder(7) is None
    assert memory_store.find_by_holder(8).id == second.id


def test_unique_holder_is_enforced(memory_store) -> None:
    first, second = memory_store.insert_many(make_postal(2))
    memory_store.update(first.held_by(5, Coordinate(0.0, 0.0)))

    with pytest.raises(StoreError):
        memory_store.update(second.held_by(5, Coordinate(1.0, 1.0)))

    # rewriting the holder's own record is allowed
    memory_store.update(first.held_by(5, Coordinate(2.0, 2.0)))
    assert memory_store.find_by_holder(5).holder_coordinate == Coordinate(2.0, 2.0)
    assert memory_store.get(second.id).holder_id is None
