"""Identifier resolution across the three id schemes records may carry.

A record is addressed by its store-generated surrogate ``key``, by a legacy
numeric id (``legacy_num``) or by a legacy string id (``legacy_id``). Rentals
reference cars and users with a tagged ``Ref`` holding one of these. This
module is the only place that knows how the schemes are tried.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable, NamedTuple, Optional

from app.storage.base import Record, Store

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^-?\d+$")

# legacy_num is a 32-bit signed column
LEGACY_NUM_MIN, LEGACY_NUM_MAX = -(2 ** 31), 2 ** 31 - 1


class IdScheme(str, Enum):
    SURROGATE = "surrogate"
    NUMERIC = "numeric"
    STRING = "string"


class Ref(NamedTuple):
    kind: IdScheme
    value: str


DEFAULT_ORDER = (IdScheme.SURROGATE, IdScheme.NUMERIC, IdScheme.STRING)

# Precedence per call site
CAR_ORDER = DEFAULT_ORDER
# new rentals carry a surrogate key; legacy ones a string (time token) or number
RENTAL_ORDER = (IdScheme.SURROGATE, IdScheme.STRING, IdScheme.NUMERIC)
USER_ORDER = DEFAULT_ORDER


def is_numeric(raw: str) -> bool:
    return bool(_INT_RE.match(raw.strip()))


def fits_legacy_num(n: int) -> bool:
    return LEGACY_NUM_MIN <= n <= LEGACY_NUM_MAX


def _lookup(store: Store, collection: str, raw: str, scheme: IdScheme) -> Optional[Record]:
    if scheme is IdScheme.SURROGATE:
        if not store.is_valid_key(raw):
            return None
        return store.get(collection, raw.lower())
    if scheme is IdScheme.NUMERIC:
        if not is_numeric(raw) or not fits_legacy_num(int(raw)):
            return None
        return store.find_one(collection, "legacy_num", int(raw))
    return store.find_one(collection, "legacy_id", raw)


def resolve(store: Store, collection: str, raw_id, order: Iterable[IdScheme] = DEFAULT_ORDER) -> Optional[Record]:
    """First record matched by the schemes in ``order``, or None."""
    if raw_id is None:
        return None
    raw = str(raw_id).strip()
    if not raw:
        return None
    for scheme in order:
        record = _lookup(store, collection, raw, scheme)
        if record is not None:
            logger.debug("resolved %s %r by %s", collection, raw, scheme.value)
            return record
    return None


def resolve_ref(store: Store, collection: str, ref: Optional[Ref]) -> Optional[Record]:
    """Resolve a stored reference: its own scheme first, then the others."""
    if ref is None:
        return None
    first = IdScheme(ref.kind)
    order = (first,) + tuple(s for s in DEFAULT_ORDER if s is not first)
    return resolve(store, collection, ref.value, order)


def ref_for(record: Record) -> Ref:
    return Ref(IdScheme.SURROGATE, record["key"])


def aliases(record: Record) -> set[Ref]:
    """Every reference that denotes ``record``."""
    out = {Ref(IdScheme.SURROGATE, record["key"])}
    num = record.get("legacy_num")
    if num is not None:
        out.add(Ref(IdScheme.NUMERIC, str(num)))
        out.add(Ref(IdScheme.STRING, str(num)))
    sid = record.get("legacy_id")
    if sid is not None:
        out.add(Ref(IdScheme.STRING, sid))
        if is_numeric(sid):
            out.add(Ref(IdScheme.NUMERIC, str(int(sid))))
    return out


def public_id(record: Record) -> str:
    if record.get("legacy_id") is not None:
        return record["legacy_id"]
    if record.get("legacy_num") is not None:
        return str(record["legacy_num"])
    return record["key"]


def split_legacy_id(value) -> dict:
    """Map a legacy ``id`` value from an export onto the legacy_num / legacy_id fields."""
    if value is None or value == "":
        return {}
    if isinstance(value, bool):
        raise ValueError("boolean is not an id")
    if isinstance(value, int) and fits_legacy_num(value):
        return {"legacy_num": value}
    return {"legacy_id": str(value)}


def ref_from_legacy(value) -> Optional[Ref]:
    """Tag a raw reference value found in a legacy export."""
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return Ref(IdScheme.NUMERIC, str(value))
    return Ref(IdScheme.STRING, str(value))


def car_ref_of(rental: Record) -> Ref:
    return Ref(IdScheme(rental["car_ref_kind"]), rental["car_ref"])


def user_ref_of(rental: Record) -> Ref:
    return Ref(IdScheme(rental["user_ref_kind"]), rental["user_ref"])
