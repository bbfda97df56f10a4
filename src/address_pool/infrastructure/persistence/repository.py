# -*- coding: utf-8 -*-
"""Record store adapters for the address pool."""
from __future__ import annotations

import threading
from typing import Callable, Dict, Hashable, List, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from address_pool.domain.address import AddressRecord, Coordinate, PostalAddress, UNALLOCATED
from address_pool.domain.shared.errors import StoreError

from .models import AddressRecordModel
from .uow import SQLAlchemyUnitOfWork

T = TypeVar("T")


class InMemoryAddressRecordStore:
    """Dictionary-backed store; records are immutable so sharing them is safe."""

    def __init__(self) -> None:
        self._records: Dict[int, AddressRecord] = {}
        self._holders: Dict[Hashable, int] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get(self, record_id: int) -> AddressRecord | None:
        with self._lock:
            return self._records.get(record_id)

    def find_by_holder(self, holder_id: Hashable) -> AddressRecord | None:
        with self._lock:
            record_id = self._holders.get(holder_id)
            return self._records[record_id] if record_id is not None else None

    def list_all(self) -> List[AddressRecord]:
        with self._lock:
            return [self._records[key] for key in sorted(self._records)]

    def list_free(self) -> List[AddressRecord]:
        return [record for record in self.list_all() if record.holder_id is None]

    def insert_many(self, postal: Sequence[PostalAddress]) -> List[AddressRecord]:
        created: List[AddressRecord] = []
        with self._lock:
            for item in postal:
                record = AddressRecord(id=self._next_id, postal=item)
                self._records[record.id] = record
                self._next_id += 1
                created.append(record)
        return created

    def update(self, record: AddressRecord) -> AddressRecord:
        with self._lock:
            stored = self._records.get(record.id)
            if stored is None:
                raise StoreError("Address record does not exist.", details={"record_id": record.id})
            if record.holder_id is not None and self._holders.get(record.holder_id, record.id) != record.id:
                raise StoreError(
                    "Vehicle already holds another address record.",
                    details={"record_id": record.id, "holder_id": record.holder_id},
                )
            # postal fields are fixed at seeding time
            updated = AddressRecord(
                id=stored.id,
                postal=stored.postal,
                holder_coordinate=record.holder_coordinate,
                holder_id=record.holder_id,
            )
            self._records[record.id] = updated
            if stored.holder_id is not None:
                self._holders.pop(stored.holder_id, None)
            if updated.holder_id is not None:
                self._holders[updated.holder_id] = updated.id
            return updated

    def count(self) -> int:
        with self._lock:
            return len(self._records)


def _to_domain(model: AddressRecordModel) -> AddressRecord:
    return AddressRecord(
        id=model.id,
        postal=PostalAddress(address=model.address, city=model.city, state=model.state, zip=model.zip),
        holder_coordinate=Coordinate(model.lat, model.lon),
        holder_id=model.vehicle_id,
    )


class SQLAlchemyAddressRecordStore:
    """Relational store; every call runs in its own unit of work."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def _run(self, operation: Callable[[Session], T]) -> T:
        try:
            with SQLAlchemyUnitOfWork(session_factory=self._session_factory) as uow:
                return operation(uow.session)
        except SQLAlchemyError as exc:
            raise StoreError("Record store operation failed.", details={"error": str(exc)}) from exc

    def get(self, record_id: int) -> AddressRecord | None:
        def _get(session: Session) -> AddressRecord | None:
            model = session.get(AddressRecordModel, record_id)
            return _to_domain(model) if model is not None else None

        return self._run(_get)

    def find_by_holder(self, holder_id: Hashable) -> AddressRecord | None:
        def _find(session: Session) -> AddressRecord | None:
            stmt = select(AddressRecordModel).where(AddressRecordModel.vehicle_id == holder_id)
            model = session.execute(stmt).scalar_one_or_none()
            return _to_domain(model) if model is not None else None

        return self._run(_find)

    def list_all(self) -> List[AddressRecord]:
        def _list(session: Session) -> List[AddressRecord]:
            stmt = select(AddressRecordModel).order_by(AddressRecordModel.id)
            return [_to_domain(model) for model in session.execute(stmt).scalars()]

        return self._run(_list)

    def list_free(self) -> List[AddressRecord]:
        def _list(session: Session) -> List[AddressRecord]:
            stmt = (
                select(AddressRecordModel)
                .where(AddressRecordModel.vehicle_id.is_(None))
                .order_by(AddressRecordModel.id)
            )
            return [_to_domain(model) for model in session.execute(stmt).scalars()]

        return self._run(_list)

    def insert_many(self, postal: Sequence[PostalAddress]) -> List[AddressRecord]:
        def _insert(session: Session) -> List[AddressRecord]:
            models = [
                AddressRecordModel(
                    lat=UNALLOCATED.lat,
                    lon=UNALLOCATED.lon,
                    vehicle_id=None,
                    address=item.address,
                    city=item.city,
                    state=item.state,
                    zip=item.zip,
                )
                for item in postal
            ]
            session.add_all(models)
            session.flush()
            return [_to_domain(model) for model in models]

        return self._run(_insert)

    def update(self, record: AddressRecord) -> AddressRecord:
        def _update(session: Session) -> AddressRecord:
            model = session.get(AddressRecordModel, record.id)
            if model is None:
                raise StoreError("Address record does not exist.", details={"record_id": record.id})
            model.vehicle_id = record.holder_id
            model.lat = record.holder_coordinate.lat
            model.lon = record.holder_coordinate.lon
            session.flush()
            return _to_domain(model)

        return self._run(_update)

    def count(self) -> int:
        return self._run(lambda session: session.execute(select(func.count(AddressRecordModel.id))).scalar_one())


__all__ = ["InMemoryAddressRecordStore", "SQLAlchemyAddressRecordStore"]
