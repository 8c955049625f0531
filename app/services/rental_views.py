"""Rentals joined with their car and owner for the listing endpoints.

Joins go through the identifier resolver because legacy rentals reference
cars and users by whatever id scheme was current when they were written.
``iter_rental_views`` yields a ``Joined`` or a ``Skipped`` per rental, so the
admin listing can drop the rows it cannot attribute without failing.
"""
import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from app.services.identity import aliases, car_ref_of, resolve_ref, user_ref_of
from app.storage.base import CARS, RENTALS, USERS, Record, Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Joined:
    rental: Record
    car: Optional[Record]
    user: Optional[Record] = None


@dataclass(frozen=True)
class Skipped:
    rental_key: str
    reason: str


RentalView = Union[Joined, Skipped]


def resolve_owner(store: Store, rental: Record) -> Optional[Record]:
    user = resolve_ref(store, USERS, user_ref_of(rental))
    if user is None and rental.get("user_email"):
        user = store.find_one(USERS, "email", rental["user_email"].lower())
    return user


def _join(store: Store, rental: Record, with_user: bool) -> RentalView:
    car = resolve_ref(store, CARS, car_ref_of(rental))
    if not with_user:
        return Joined(rental=rental, car=car)
    user = resolve_owner(store, rental)
    if user is None:
        return Skipped(rental_key=rental["key"], reason="user not found")
    return Joined(rental=rental, car=car, user=user)


def iter_rental_views(store: Store, rentals: list[Record], with_user: bool = True) -> Iterator[RentalView]:
    for rental in rentals:
        try:
            yield _join(store, rental, with_user)
        except Exception as e:
            logger.exception("failed to join rental %s", rental.get("key"))
            yield Skipped(rental_key=rental.get("key", "?"), reason=f"error: {e}")


def list_for_principal(store: Store, principal: Record) -> list[Joined]:
    refs = aliases(principal)
    email = (principal.get("email") or "").lower()

    def mine(r: Record) -> bool:
        return user_ref_of(r) in refs or (r.get("user_email") or "").lower() == email

    rentals = store.scan(RENTALS, predicate=mine)
    return [v for v in iter_rental_views(store, rentals, with_user=False) if isinstance(v, Joined)]


def list_all(store: Store) -> list[Joined]:
    rentals = store.scan(RENTALS)
    out = []
    for view in iter_rental_views(store, rentals):
        if isinstance(view, Skipped):
            logger.warning("skipping rental %s: %s", view.rental_key, view.reason)
            continue
        out.append(view)
    logger.info("listing %d of %d rentals", len(out), len(rentals))
    return out
