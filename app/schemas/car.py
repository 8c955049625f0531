from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from app.services.identity import public_id


class CarIn(BaseModel):
    id: Optional[Union[int, str]] = None  # legacy catalog id, optional
    make: str
    model: str
    year: int = Field(ge=1900)
    body_type: str = ""
    seats: int = Field(default=4, ge=1)
    transmission: str = "automatic"
    fuel_type: str = ""
    price_per_day: float = Field(ge=0)
    currency: str = "USD"
    available: bool = True
    details: dict[str, Any] = Field(default_factory=dict)


class CarUpdate(BaseModel):
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900)
    body_type: Optional[str] = None
    seats: Optional[int] = Field(default=None, ge=1)
    transmission: Optional[str] = None
    fuel_type: Optional[str] = None
    price_per_day: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    available: Optional[bool] = None
    details: Optional[dict[str, Any]] = None


class CarOut(BaseModel):
    id: str
    key: str
    make: str
    model: str
    year: int
    body_type: str = ""
    seats: int = 4
    transmission: str = ""
    fuel_type: str = ""
    price_per_day: float
    currency: str = "USD"
    available: bool = True
    details: dict[str, Any] = Field(default_factory=dict)
    createdAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, c: dict) -> "CarOut":
        return cls(
            id=public_id(c),
            key=c["key"],
            make=c["make"],
            model=c["model"],
            year=c["year"],
            body_type=c.get("body_type") or "",
            seats=c.get("seats") or 4,
            transmission=c.get("transmission") or "",
            fuel_type=c.get("fuel_type") or "",
            price_per_day=c["price_per_day"],
            currency=c.get("currency") or "USD",
            available=c.get("available", True),
            details=c.get("details") or {},
            createdAt=c.get("created_at"),
        )
