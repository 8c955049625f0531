import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import Conflict, NotFound
from app.models.car import Car
from app.models.rental import Rental
from app.models.user import User
from app.storage.base import CARS, RENTALS, USERS, Predicate, Record, Store, new_key

logger = logging.getLogger(__name__)

MODELS = {CARS: Car, USERS: User, RENTALS: Rental}


def _to_record(row) -> Record:
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}


class SqlStore(Store):
    """Store over SQLAlchemy sessions.

    Each call runs in its own short session and commits, unless the store is
    bound to a session (see ``booking_lock``): then every call shares that
    session, writes are only flushed, and the owner of the session commits.
    """

    name = "database"

    def __init__(self, session_factory: sessionmaker, bound: Optional[Session] = None):
        super().__init__()
        self._session_factory = session_factory
        self._bound = bound

    def _model(self, collection: str):
        try:
            return MODELS[collection]
        except KeyError:
            raise ValueError(f"unknown collection: {collection}")

    def _columns(self, model) -> set[str]:
        return {c.key for c in model.__table__.columns}

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._bound is not None:
            yield self._bound
            return
        with self._session_factory() as db:
            yield db

    def _save(self, db: Session, collection: str) -> None:
        try:
            if self._bound is not None:
                db.flush()
            else:
                db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning("integrity error writing %s: %s", collection, e.orig)
            raise Conflict(f"duplicate {collection} record") from e

    def get(self, collection: str, key: str) -> Optional[Record]:
        model = self._model(collection)
        with self._session() as db:
            row = db.get(model, key)
            return _to_record(row) if row else None

    def find_one(self, collection: str, field: str, value: Any) -> Optional[Record]:
        model = self._model(collection)
        with self._session() as db:
            row = db.execute(
                select(model).where(getattr(model, field) == value).order_by(model.created_at, model.key).limit(1)
            ).scalar_one_or_none()
            return _to_record(row) if row else None

    def insert(self, collection: str, doc: Record) -> Record:
        model = self._model(collection)
        cols = self._columns(model)
        values = {k: v for k, v in doc.items() if k in cols}
        values.setdefault("key", new_key())
        values.setdefault("created_at", datetime.now(timezone.utc))
        row = model(**values)
        with self._session() as db:
            db.add(row)
            self._save(db, collection)
            db.refresh(row)
            return _to_record(row)

    def update(self, collection: str, key: str, changes: Record) -> Record:
        model = self._model(collection)
        cols = self._columns(model)
        with self._session() as db:
            row = db.get(model, key)
            if row is None:
                raise NotFound(f"{collection} record not found")
            for k, v in changes.items():
                if k in cols and k != "key":
                    setattr(row, k, v)
            self._save(db, collection)
            db.refresh(row)
            return _to_record(row)

    def delete(self, collection: str, key: str) -> bool:
        model = self._model(collection)
        with self._session() as db:
            row = db.get(model, key)
            if row is None:
                return False
            db.delete(row)
            self._save(db, collection)
            return True

    def scan(self, collection: str, where: Optional[Record] = None, predicate: Optional[Predicate] = None) -> list[Record]:
        model = self._model(collection)
        q = select(model)
        for field, value in (where or {}).items():
            q = q.where(getattr(model, field) == value)
        q = q.order_by(model.created_at, model.key)
        with self._session() as db:
            records = [_to_record(r) for r in db.execute(q).scalars()]
        if predicate is not None:
            records = [r for r in records if predicate(r)]
        return records

    @contextmanager
    def booking_lock(self, car_key: str) -> Iterator[Store]:
        # One connection per booking: the row lock, the overlap check and the
        # write share a transaction. FOR UPDATE is a no-op on SQLite, where
        # the in-process lock carries it.
        if self._bound is not None:
            yield self
            return
        with self._booking_locks.get(car_key), self._session_factory() as db:
            db.execute(select(Car.key).where(Car.key == car_key).with_for_update()).scalar_one_or_none()
            tx = SqlStore(self._session_factory, bound=db)
            tx.ids = self.ids
            try:
                yield tx
            except BaseException:
                db.rollback()
                raise
            db.commit()
