"""Seed the store with an admin account and, once, with legacy JSON exports.

Legacy exports keep their original ``id`` values (numeric for users, string or
numeric for cars and rentals) and rentals keep their raw ``carId``/``userId``
references, so records written by older versions stay addressable.
"""
import json
import logging
from pathlib import Path

from app.core.config import settings
from app.core.errors import Conflict
from app.services.auth_service import ensure_user
from app.services.identity import ref_from_legacy, split_legacy_id
from app.storage.base import CARS, RENTALS, USERS, Store

logger = logging.getLogger(__name__)

CAR_FIELDS = ("make", "model", "year", "body_type", "seats", "transmission", "fuel_type", "currency", "available")


def _load(seed_dir: Path, filename: str) -> list[dict]:
    path = seed_dir / filename
    if not path.exists():
        return []
    return json.loads(path.read_text(encoding="utf-8") or "[]")


def seed_users(store: Store, users: list[dict]) -> int:
    n = 0
    for u in users:
        email = (u.get("email") or "").lower()
        if not email or store.find_one(USERS, "email", email):
            continue
        first, _, last = (u.get("name") or "").partition(" ")
        try:
            store.insert(USERS, {
                **split_legacy_id(u.get("id")),
                "email": email,
                "username": u.get("username") or email.split("@")[0],
                "first_name": u.get("firstName") or first,
                "last_name": u.get("lastName") or last,
                "phone_number": u.get("phoneNumber") or "",
                "role": u.get("role") or "user",
                "password_hash": u.get("passwordHash") or "",
            })
            n += 1
        except Conflict:
            logger.warning("skipping duplicate user %s", email)
    return n


def seed_cars(store: Store, cars: list[dict]) -> int:
    n = 0
    for c in cars:
        data = {k: c[k] for k in CAR_FIELDS if k in c}
        data["price_per_day"] = c.get("price_per_day", c.get("pricePerDay", 0))
        data["details"] = {k: v for k, v in c.items() if k not in CAR_FIELDS and k not in ("id", "price_per_day", "pricePerDay")}
        try:
            store.insert(CARS, {**data, **split_legacy_id(c.get("id"))})
            n += 1
        except Conflict:
            logger.warning("skipping duplicate car %r", c.get("id"))
    return n


def seed_rentals(store: Store, rentals: list[dict]) -> int:
    n = 0
    for r in rentals:
        car_ref = ref_from_legacy(r.get("carId"))
        user_ref = ref_from_legacy(r.get("userId"))
        if car_ref is None or user_ref is None:
            logger.warning("skipping rental %r without car/user reference", r.get("id"))
            continue
        try:
            store.insert(RENTALS, {
                **split_legacy_id(r.get("id")),
                "car_ref_kind": car_ref.kind.value,
                "car_ref": car_ref.value,
                "user_ref_kind": user_ref.kind.value,
                "user_ref": user_ref.value,
                "user_email": (r.get("userEmail") or "").lower(),
                "username": r.get("username") or "",
                "start_date": r["startDate"][:10],
                "end_date": r["endDate"][:10],
                "total_days": r.get("totalDays") or 1,
                "price_per_day": r.get("pricePerDay") or 0,
                "total_price": r.get("totalPrice") or 0,
                "pickup_location": r.get("pickupLocation") or "Default Location",
                "dropoff_location": r.get("dropoffLocation") or "Default Location",
                "special_requests": r.get("specialRequests") or "",
                "payment_info": r.get("paymentInfo"),
                "status": r.get("status") or "active",
            })
            n += 1
        except (Conflict, KeyError) as e:
            logger.warning("skipping rental %r: %s", r.get("id"), e)
    return n


def run(store: Store, seed_dir: str | None = None):
    if settings.ADMIN_PASSWORD:
        ensure_user(store, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, "admin", "admin")

    seed_dir = seed_dir if seed_dir is not None else settings.SEED_DIR
    if not seed_dir:
        return
    if store.count(USERS) > 1 or store.count(CARS) > 0:
        logger.info("store already has data, skipping seed")
        return

    d = Path(seed_dir)
    counts = {
        "users": seed_users(store, _load(d, "users.json")),
        "cars": seed_cars(store, _load(d, "cars.json")),
        "rentals": seed_rentals(store, _load(d, "rentItem.json")),
    }
    logger.info("seeded %s", counts)
    return counts
