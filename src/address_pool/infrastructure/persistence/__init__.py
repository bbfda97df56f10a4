from .models import AddressRecordModel, Base
from .repository import InMemoryAddressRecordStore, SQLAlchemyAddressRecordStore
from .session import create_schema, make_engine, make_session_factory
from .uow import SQLAlchemyUnitOfWork

__all__ = [
    "AddressRecordModel",
    "Base",
    "InMemoryAddressRecordStore",
    "SQLAlchemyAddressRecordStore",
    "SQLAlchemyUnitOfWork",
    "create_schema",
    "make_engine",
    "make_session_factory",
]
