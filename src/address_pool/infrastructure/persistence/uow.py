"""Unit of work wrapping one SQLAlchemy session per store call."""
from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from address_pool.domain.shared.errors import StoreError


SessionFactory = Callable[[], Session]


@dataclass(slots=True)
class SQLAlchemyUnitOfWork(AbstractContextManager):
    """Commit on clean exit, roll back on error, always close."""

    session_factory: SessionFactory
    session: Session = field(init=False)
    _skip_commit: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.session = self.session_factory()

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError("COMMIT_FAILED", details={"error": str(exc)}) from exc

    def rollback(self) -> None:
        self._skip_commit = True
        self.session.rollback()

    def close(self) -> None:
        self.session.close()

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc:
                self.rollback()
            elif not self._skip_commit:
                self.commit()
        finally:
            self.close()
        return False
