from sqlalchemy import String, Integer, Float, DateTime, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

class Rental(Base):
    __tablename__ = "rentals"

    key: Mapped[str] = mapped_column(String(36), primary_key=True)
    legacy_num: Mapped[int] = mapped_column(Integer, unique=True, nullable=True)
    legacy_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=True)  # time-derived public id

    # tagged references: kind is surrogate | numeric | string
    car_ref_kind: Mapped[str] = mapped_column(String(10))
    car_ref: Mapped[str] = mapped_column(String(64), index=True)
    user_ref_kind: Mapped[str] = mapped_column(String(10))
    user_ref: Mapped[str] = mapped_column(String(64), index=True)

    user_email: Mapped[str] = mapped_column(String(320), index=True)
    username: Mapped[str] = mapped_column(String(80), default="")

    start_date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    end_date: Mapped[str] = mapped_column(String(10))
    total_days: Mapped[int] = mapped_column(Integer)
    price_per_day: Mapped[float] = mapped_column(Float)
    total_price: Mapped[float] = mapped_column(Float)

    pickup_location: Mapped[str] = mapped_column(String(200), default="Default Location")
    dropoff_location: Mapped[str] = mapped_column(String(200), default="Default Location")
    special_requests: Mapped[str] = mapped_column(Text, default="")
    payment_info: Mapped[dict] = mapped_column(JSON, nullable=True)

    status: Mapped[str] = mapped_column(String(12), default="active", index=True)  # active, completed, cancelled
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
