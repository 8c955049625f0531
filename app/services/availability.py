"""Overlap detection for active rentals of one car.

Dates are stored as ``YYYY-MM-DD`` strings, so string comparison orders them
the same way as the calendar does.
"""
from datetime import date, datetime
from typing import Optional

from app.core.errors import ValidationError
from app.services.identity import aliases, car_ref_of
from app.storage.base import RENTALS, Record, Store

ACTIVE = "active"


def parse_date(value, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format")


def parse_date_range(start, end) -> tuple[date, date]:
    if not start or not end:
        raise ValidationError("Start date and end date are required")
    s = parse_date(start, "startDate")
    e = parse_date(end, "endDate")
    if e < s:
        raise ValidationError("End date must not be before start date")
    return s, e


def overlaps(s1: str, e1: str, s2: str, e2: str) -> bool:
    """Inclusive on both ends: ranges sharing a single day overlap."""
    return s1 <= e2 and e1 >= s2


def active_rentals_for(store: Store, car: Record, exclude_key: Optional[str] = None) -> list[Record]:
    refs = aliases(car)
    return store.scan(
        RENTALS,
        where={"status": ACTIVE},
        predicate=lambda r: r["key"] != exclude_key and car_ref_of(r) in refs,
    )


def is_available(store: Store, car: Record, start, end, exclude_key: Optional[str] = None) -> bool:
    s, e = parse_date_range(start, end)
    s_iso, e_iso = s.isoformat(), e.isoformat()
    return not any(
        overlaps(r["start_date"], r["end_date"], s_iso, e_iso)
        for r in active_rentals_for(store, car, exclude_key)
    )


def active_bookings(store: Store, car: Record) -> list[dict]:
    return [
        {"startDate": r["start_date"], "endDate": r["end_date"]}
        for r in sorted(active_rentals_for(store, car), key=lambda r: r["start_date"])
    ]
