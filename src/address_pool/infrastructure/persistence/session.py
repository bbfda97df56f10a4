# -*- coding: utf-8 -*-
from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


def make_engine(dsn: str) -> Engine:
    url = make_url(dsn)
    if url.get_backend_name() == "sqlite":
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return create_engine(url, **options)

    engine = create_engine(
        url,
        pool_size=20,
        max_overflow=40,
        pool_timeout=5,
        pool_recycle=1800,
    )

    if url.get_backend_name() == "postgresql":

        @event.listens_for(engine, "connect")
        def set_statement_timeout(dbapi_connection, connection_record):  # pragma: no cover - driver specific
            cursor = dbapi_connection.cursor()
            cursor.execute("SET statement_timeout TO 2000")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)
