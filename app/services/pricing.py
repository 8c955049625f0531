import math
from datetime import date
from typing import NamedTuple

from app.core.errors import ValidationError

DAY_SECONDS = 24 * 60 * 60


class Quote(NamedTuple):
    days: int
    total: float


def price(start: date, end: date, per_day: float) -> Quote:
    days = math.ceil((end - start).total_seconds() / DAY_SECONDS)
    if days < 1:
        raise ValidationError("End date must be at least one day after start date")
    if per_day is None or per_day < 0:
        raise ValidationError("Car has no valid daily rate")
    return Quote(days=days, total=days * per_day)
