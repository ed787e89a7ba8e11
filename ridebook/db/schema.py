"""SQLAlchemy ORM models for ride persistence."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .utils import utc_now


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    role: Mapped[str] = mapped_column(String, nullable=False, default="user")
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    home_address: Mapped[str | None] = mapped_column(String, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )


class Ride(Base):
    __tablename__ = "rides"

    ride_id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    driver_id: Mapped[str | None] = mapped_column(String, nullable=True)
    pickup: Mapped[str] = mapped_column(String, nullable=False)
    dropoff: Mapped[str] = mapped_column(String, nullable=False)
    stops: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    date_time: Mapped[datetime] = mapped_column(nullable=False)
    return_date_time: Mapped[datetime | None] = mapped_column(nullable=True)
    is_round_trip: Mapped[bool] = mapped_column(Boolean, default=False)
    transport_type: Mapped[str | None] = mapped_column(String, nullable=True)
    transport_number: Mapped[str | None] = mapped_column(String, nullable=True)
    direction: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False)
    fees: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    fare: Mapped[float] = mapped_column(Float, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    is_revised: Mapped[bool] = mapped_column(Boolean, default=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    cancelled_at: Mapped[datetime | None] = mapped_column(nullable=True)
    cancellation_fee_applied: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(default=lambda: utc_now())
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )

    __table_args__ = (
        Index("idx_ride_status", "status"),
        Index("idx_ride_user", "user_id"),
        Index("idx_ride_driver", "driver_id"),
    )
