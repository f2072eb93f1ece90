"""Keyed record store over a SQLModel engine.

The registry and the relay only talk to storage through this class. One
instance wraps the process-wide engine and is shared by every request;
each call runs in its own short-lived session and transaction.
"""

import logging
from typing import Any, Optional, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy import text
from sqlalchemy import update as sa_update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from clipconnect.exceptions import StorageError, UniqueViolation

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SQLModel)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a uniqueness conflict apart from other integrity errors."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig)
    return "UNIQUE constraint failed" in message or "Duplicate entry" in message


class RecordStore:
    def __init__(self, engine: Engine):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def _fail(self, op: str, model: type[SQLModel], exc: Exception) -> StorageError:
        logger.error("Storage %s on %s failed: %s", op, model.__tablename__, exc)
        return StorageError()

    def find(self, model: type[T], **filters: Any) -> Optional[T]:
        try:
            with Session(self._engine) as session:
                return session.exec(select(model).filter_by(**filters)).first()
        except SQLAlchemyError as e:
            raise self._fail("find", model, e) from e

    def find_all(self, model: type[T], **filters: Any) -> list[T]:
        try:
            with Session(self._engine) as session:
                return list(session.exec(select(model).filter_by(**filters)).all())
        except SQLAlchemyError as e:
            raise self._fail("find_all", model, e) from e

    def insert(self, record: T) -> T:
        """Persist ``record`` and return it with generated columns loaded.

        Raises UniqueViolation when a unique constraint rejects the row.
        """
        model = type(record)
        try:
            with Session(self._engine) as session:
                session.add(record)
                session.commit()
                session.refresh(record)
                return record
        except IntegrityError as e:
            if is_unique_violation(e):
                logger.debug("Unique violation on %s: %s", model.__tablename__, e.orig)
                raise UniqueViolation() from e
            raise self._fail("insert", model, e) from e
        except SQLAlchemyError as e:
            raise self._fail("insert", model, e) from e

    def append_unique(self, record: SQLModel) -> bool:
        """Atomic set-append: False if an equal row is already present."""
        try:
            self.insert(record)
        except UniqueViolation:
            return False
        return True

    def update(self, model: type[SQLModel], filters: dict[str, Any], patch: dict[str, Any]) -> int:
        stmt = sa_update(model).filter_by(**filters).values(**patch)
        try:
            with Session(self._engine) as session:
                result = session.execute(stmt)
                session.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise self._fail("update", model, e) from e

    def delete(self, model: type[SQLModel], **filters: Any) -> int:
        stmt = sa_delete(model).filter_by(**filters)
        try:
            with Session(self._engine) as session:
                result = session.execute(stmt)
                session.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise self._fail("delete", model, e) from e

    def query_latest(self, model: type[T], order_key: str, **filters: Any) -> Optional[T]:
        """Newest row by ``order_key``; primary key breaks timestamp ties."""
        order_col = getattr(model, order_key)
        pk_cols = list(model.__table__.primary_key.columns)
        stmt = (
            select(model)
            .filter_by(**filters)
            .order_by(order_col.desc(), *(c.desc() for c in pk_cols))
            .limit(1)
        )
        try:
            with Session(self._engine) as session:
                return session.exec(stmt).first()
        except SQLAlchemyError as e:
            raise self._fail("query_latest", model, e) from e

    def ping(self) -> bool:
        try:
            with Session(self._engine) as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Storage ping failed: %s", e)
            return False
