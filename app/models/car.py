from sqlalchemy import String, Integer, Float, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

class Car(Base):
    __tablename__ = "cars"

    key: Mapped[str] = mapped_column(String(36), primary_key=True)
    # legacy catalog ids: either numeric or string, never both
    legacy_num: Mapped[int] = mapped_column(Integer, unique=True, nullable=True)
    legacy_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=True)

    make: Mapped[str] = mapped_column(String(80))
    model: Mapped[str] = mapped_column(String(80))
    year: Mapped[int] = mapped_column(Integer)
    body_type: Mapped[str] = mapped_column(String(40), default="")
    seats: Mapped[int] = mapped_column(Integer, default=4)
    transmission: Mapped[str] = mapped_column(String(30), default="automatic")
    fuel_type: Mapped[str] = mapped_column(String(30), default="")

    price_per_day: Mapped[float] = mapped_column(Float, default=0)
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    available: Mapped[bool] = mapped_column(Boolean, default=True)

    details: Mapped[dict] = mapped_column(JSON, default=dict)  # overview, engine, colors, features, images
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
