"""Storage interface shared by the SQL and JSON-file backends.

Records are plain dicts ("documents") whose keys are the column names of the
models in app.models. Every record carries a surrogate ``key`` generated by the
store and may carry one legacy identifier in ``legacy_num`` or ``legacy_id``.
"""
from __future__ import annotations

import threading
import time
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

CARS = "cars"
USERS = "users"
RENTALS = "rentals"
COLLECTIONS = (CARS, USERS, RENTALS)

Record = dict[str, Any]
Predicate = Callable[[Record], bool]


def new_key() -> str:
    return str(uuid.uuid4())


class KeyedLocks:
    """One mutex per key, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock


class MonotonicIds:
    """Millisecond timestamps, bumped so ids issued by one store never repeat."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> str:
        with self._lock:
            self._last = max(int(time.time() * 1000), self._last + 1)
            return str(self._last)


class Store(ABC):
    name = "abstract"

    def __init__(self) -> None:
        self._booking_locks = KeyedLocks()
        self.ids = MonotonicIds()

    def is_valid_key(self, raw: str) -> bool:
        try:
            return str(uuid.UUID(raw)) == raw.lower()
        except (ValueError, AttributeError, TypeError):
            return False

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[Record]:
        ...

    @abstractmethod
    def find_one(self, collection: str, field: str, value: Any) -> Optional[Record]:
        ...

    @abstractmethod
    def insert(self, collection: str, doc: Record) -> Record:
        """Persist a new record; assigns ``key`` when missing and returns the stored record."""

    @abstractmethod
    def update(self, collection: str, key: str, changes: Record) -> Record:
        ...

    @abstractmethod
    def delete(self, collection: str, key: str) -> bool:
        ...

    @abstractmethod
    def scan(
        self,
        collection: str,
        where: Optional[Record] = None,
        predicate: Optional[Predicate] = None,
    ) -> list[Record]:
        """Records matching every ``where`` equality and the optional predicate."""

    def count(self, collection: str) -> int:
        return len(self.scan(collection))

    @contextmanager
    def booking_lock(self, car_key: str) -> Iterator["Store"]:
        """Serialise availability check + write for one vehicle.

        Yields the store to run the check and the write on; backends with
        transactions yield a view bound to the locking transaction, committed
        when the block exits cleanly.
        """
        with self._booking_locks.get(car_key):
            yield self

    def close(self) -> None:
        pass
