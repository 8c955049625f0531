import logging
from typing import Optional

from app.core.errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError
from app.services.availability import ACTIVE, is_available, parse_date_range
from app.services.identity import (
    CAR_ORDER,
    RENTAL_ORDER,
    car_ref_of,
    ref_for,
    resolve,
    resolve_ref,
    user_ref_of,
)
from app.services.pricing import price
from app.storage.base import CARS, RENTALS, USERS, Record, Store

logger = logging.getLogger(__name__)

CANCELLED = "cancelled"
COMPLETED = "completed"
STATUSES = (ACTIVE, COMPLETED, CANCELLED)
DEFAULT_LOCATION = "Default Location"


def _allocate_rental_id(store: Store) -> str:
    for _ in range(10):
        rid = store.ids.next()
        if store.find_one(RENTALS, "legacy_id", rid) is None:
            return rid
    raise Conflict("could not allocate rental id")


def create_booking(
    store: Store,
    principal: Optional[Record],
    car_id: str,
    start_date,
    end_date,
    pickup_location: Optional[str] = None,
    dropoff_location: Optional[str] = None,
    special_requests: Optional[str] = None,
    payment_info: Optional[dict] = None,
) -> tuple[Record, Record]:
    if not principal:
        raise Unauthorized("Unauthorized")

    car = resolve(store, CARS, car_id, CAR_ORDER)
    if car is None:
        raise NotFound("Car not found")

    start, end = parse_date_range(start_date, end_date)
    quote = price(start, end, car.get("price_per_day"))
    start_iso, end_iso = start.isoformat(), end.isoformat()

    car_ref = ref_for(car)
    user_ref = ref_for(principal)

    # Check and insert under one lock so two overlapping requests cannot both pass
    with store.booking_lock(car["key"]) as tx:
        if not is_available(tx, car, start_iso, end_iso):
            raise Conflict("Car is already rented for the selected dates")

        rental = tx.insert(RENTALS, {
            "legacy_id": _allocate_rental_id(tx),
            "car_ref_kind": car_ref.kind.value,
            "car_ref": car_ref.value,
            "user_ref_kind": user_ref.kind.value,
            "user_ref": user_ref.value,
            "user_email": principal["email"],
            "username": principal.get("username") or "",
            "start_date": start_iso,
            "end_date": end_iso,
            "total_days": quote.days,
            "price_per_day": car["price_per_day"],
            "total_price": quote.total,
            "pickup_location": pickup_location or DEFAULT_LOCATION,
            "dropoff_location": dropoff_location or DEFAULT_LOCATION,
            "special_requests": special_requests or "",
            "payment_info": payment_info,
            "status": ACTIVE,
        })

    logger.info(
        "rental %s created: car=%s user=%s %s..%s total=%s",
        rental["legacy_id"], car["key"], principal["email"], start_iso, end_iso, quote.total,
    )
    return rental, car


def owns_rental(store: Store, principal: Record, rental: Record) -> bool:
    owner = resolve_ref(store, USERS, user_ref_of(rental))
    if owner is not None and owner["key"] == principal["key"]:
        return True
    # legacy rentals may reference an id the user no longer carries
    email = (rental.get("user_email") or "").lower()
    return bool(email) and email == (principal.get("email") or "").lower()


def cancel_booking(store: Store, principal: Optional[Record], rental_id: str) -> Record:
    if not principal:
        raise Unauthorized("Unauthorized")

    rental = resolve(store, RENTALS, rental_id, RENTAL_ORDER)
    if rental is None:
        raise NotFound("Rental not found")

    if principal.get("role") != "admin" and not owns_rental(store, principal, rental):
        raise Forbidden("Not authorized to cancel this rental")

    if rental["status"] == CANCELLED:
        return rental
    if rental["status"] == COMPLETED:
        raise Conflict("Completed rentals cannot be cancelled")

    updated = store.update(RENTALS, rental["key"], {"status": CANCELLED})
    logger.info("rental %s cancelled by %s", rental["key"], principal["email"])
    return updated


def update_booking(
    store: Store,
    rental_id: str,
    start_date=None,
    end_date=None,
    status: Optional[str] = None,
) -> tuple[Record, Optional[Record]]:
    rental = resolve(store, RENTALS, rental_id, RENTAL_ORDER)
    if rental is None:
        raise NotFound("Rental not found")

    if bool(start_date) != bool(end_date):
        raise ValidationError("startDate and endDate must be supplied together")
    if status is not None and status not in STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(STATUSES)}")

    car = resolve_ref(store, CARS, car_ref_of(rental))
    changes: dict = {}

    if start_date:
        if car is None:
            raise NotFound("Associated car not found")
        start, end = parse_date_range(start_date, end_date)
        quote = price(start, end, car.get("price_per_day"))
        changes.update({
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "total_days": quote.days,
            "price_per_day": car["price_per_day"],
            "total_price": quote.total,
        })
    if status is not None:
        changes["status"] = status

    if not changes:
        return rental, car

    new_status = changes.get("status", rental["status"])
    dates_changed = "start_date" in changes and (
        changes["start_date"] != rental["start_date"] or changes["end_date"] != rental["end_date"]
    )
    needs_check = new_status == ACTIVE and car is not None and (dates_changed or rental["status"] != ACTIVE)

    if needs_check:
        with store.booking_lock(car["key"]) as tx:
            s = changes.get("start_date", rental["start_date"])
            e = changes.get("end_date", rental["end_date"])
            if not is_available(tx, car, s, e, exclude_key=rental["key"]):
                raise Conflict("Car is already rented for the selected dates")
            updated = tx.update(RENTALS, rental["key"], changes)
    else:
        updated = store.update(RENTALS, rental["key"], changes)

    logger.info("rental %s updated: %s", rental["key"], sorted(changes))
    return updated, car


def complete_finished(store: Store, today: str) -> int:
    """Mark active rentals that ended before ``today`` (YYYY-MM-DD) as completed."""
    done = 0
    for r in store.scan(RENTALS, where={"status": ACTIVE}, predicate=lambda r: r["end_date"] < today):
        store.update(RENTALS, r["key"], {"status": COMPLETED})
        done += 1
    if done:
        logger.info("completed %d finished rentals", done)
    return done
