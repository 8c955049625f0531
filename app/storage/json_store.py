import json
import logging
import os
import tempfile
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional

from app.core.errors import Conflict, NotFound
from app.storage.base import CARS, COLLECTIONS, RENTALS, USERS, Predicate, Record, Store, new_key

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = {
    CARS: ("legacy_num", "legacy_id"),
    USERS: ("legacy_num", "legacy_id", "email", "username"),
    RENTALS: ("legacy_num", "legacy_id"),
}


def _default(o):
    if isinstance(o, (datetime, date)):
        return o.isoformat()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


class JsonFileStore(Store):
    """One JSON array per collection under ``data_dir``; whole-file rewrite on every change."""

    name = "json"

    def __init__(self, data_dir: str | os.PathLike):
        super().__init__()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._locks = {c: threading.RLock() for c in COLLECTIONS}

    def _path(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise ValueError(f"unknown collection: {collection}")
        return self.data_dir / f"{collection}.json"

    def _read(self, collection: str) -> list[Record]:
        path = self._path(collection)
        if not path.exists():
            return []
        text = path.read_text(encoding="utf-8")
        return json.loads(text) if text.strip() else []

    def _write(self, collection: str, docs: list[Record]) -> None:
        path = self._path(collection)
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=f".{collection}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(docs, f, indent=2, ensure_ascii=False, default=_default)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _check_unique(self, collection: str, docs: list[Record], doc: Record) -> None:
        for field in UNIQUE_FIELDS[collection]:
            value = doc.get(field)
            if value is None:
                continue
            for other in docs:
                if other["key"] != doc["key"] and other.get(field) == value:
                    logger.warning("duplicate %s.%s=%r", collection, field, value)
                    raise Conflict(f"duplicate {collection} record")

    def get(self, collection: str, key: str) -> Optional[Record]:
        with self._locks[collection]:
            return next((d for d in self._read(collection) if d.get("key") == key), None)

    def find_one(self, collection: str, field: str, value: Any) -> Optional[Record]:
        with self._locks[collection]:
            return next((d for d in self._read(collection) if d.get(field) == value), None)

    def insert(self, collection: str, doc: Record) -> Record:
        doc = dict(doc)
        doc.setdefault("key", new_key())
        doc.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        with self._locks[collection]:
            docs = self._read(collection)
            self._check_unique(collection, docs, doc)
            docs.append(doc)
            self._write(collection, docs)
        return json.loads(json.dumps(doc, default=_default))

    def update(self, collection: str, key: str, changes: Record) -> Record:
        with self._locks[collection]:
            docs = self._read(collection)
            for i, d in enumerate(docs):
                if d.get("key") == key:
                    updated = {**d, **{k: v for k, v in changes.items() if k != "key"}}
                    self._check_unique(collection, docs, updated)
                    docs[i] = updated
                    self._write(collection, docs)
                    return json.loads(json.dumps(updated, default=_default))
        raise NotFound(f"{collection} record not found")

    def delete(self, collection: str, key: str) -> bool:
        with self._locks[collection]:
            docs = self._read(collection)
            kept = [d for d in docs if d.get("key") != key]
            if len(kept) == len(docs):
                return False
            self._write(collection, kept)
            return True

    def scan(self, collection: str, where: Optional[Record] = None, predicate: Optional[Predicate] = None) -> list[Record]:
        with self._locks[collection]:
            docs = self._read(collection)
        where = where or {}
        out = [d for d in docs if all(d.get(k) == v for k, v in where.items())]
        if predicate is not None:
            out = [d for d in out if predicate(d)]
        return out
