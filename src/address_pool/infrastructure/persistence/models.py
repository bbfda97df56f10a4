# -*- coding: utf-8 -*-
from __future__ import annotations

from sqlalchemy import BigInteger, Column, Float, Index, Integer, String
from sqlalchemy.orm import declarative_base

from address_pool.domain.address import UNALLOCATED

Base = declarative_base()


class AddressRecordModel(Base):
    __tablename__ = "address_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lat = Column(Float, nullable=False, default=UNALLOCATED.lat)
    lon = Column(Float, nullable=False, default=UNALLOCATED.lon)
    vehicle_id = Column(BigInteger, nullable=True, unique=True)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zip = Column(String, nullable=False)

    __table_args__ = (
        Index("ix_address_records_free", "vehicle_id", "id"),
    )
