from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from app.schemas.car import CarOut
from app.schemas.auth import UserOut
from app.services.identity import public_id


class DateRange(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None


class AvailabilityOut(BaseModel):
    available: bool
    car: dict


class BookingsOut(BaseModel):
    bookings: List[DateRange]


class RentalCreate(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    pickupLocation: Optional[str] = None
    dropoffLocation: Optional[str] = None
    specialRequests: Optional[str] = None
    paymentInfo: Optional[dict[str, Any]] = None  # stored as given


class RentalUpdate(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    status: Optional[str] = None


class RentalOut(BaseModel):
    id: str
    key: str
    carId: str
    userId: str
    userEmail: str
    username: str = ""
    startDate: str
    endDate: str
    totalDays: int
    pricePerDay: float
    totalPrice: float
    pickupLocation: str = ""
    dropoffLocation: str = ""
    specialRequests: str = ""
    paymentInfo: Optional[dict[str, Any]] = None
    status: str
    createdAt: Optional[datetime] = None
    car: Optional[CarOut] = None
    user: Optional[UserOut] = None

    @classmethod
    def from_record(cls, r: dict, car: dict | None = None, user: dict | None = None) -> "RentalOut":
        return cls(
            id=public_id(r),
            key=r["key"],
            carId=r["car_ref"],
            userId=r["user_ref"],
            userEmail=r.get("user_email") or "",
            username=r.get("username") or "",
            startDate=r["start_date"],
            endDate=r["end_date"],
            totalDays=r["total_days"],
            pricePerDay=r["price_per_day"],
            totalPrice=r["total_price"],
            pickupLocation=r.get("pickup_location") or "",
            dropoffLocation=r.get("dropoff_location") or "",
            specialRequests=r.get("special_requests") or "",
            paymentInfo=r.get("payment_info"),
            status=r["status"],
            createdAt=r.get("created_at"),
            car=CarOut.from_record(car) if car else None,
            user=UserOut.from_record(user) if user else None,
        )


class RentalCreated(BaseModel):
    message: str
    rental: RentalOut
