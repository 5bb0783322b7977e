"""Domain models for the reservation system."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        def __str__(self) -> str:
            return str(self.value)


class Role(StrEnum):
    USER = "User"
    ADMIN = "Admin"


class ReservationStatus(StrEnum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class PaymentStatus(StrEnum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class NotificationType(StrEnum):
    RESERVATION = "Reservation"
    PAYMENT = "Payment"
    SYSTEM = "System"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UtcModel(BaseModel):
    """Base for models whose datetime fields must be timezone-aware UTC."""

    @field_validator("*", mode="after")
    @classmethod
    def _normalise_datetimes(cls, value):
        if isinstance(value, datetime):
            return as_utc(value)
        return value


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class User(UtcModel):
    id: str = Field(default_factory=_new_id)
    email: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    phone_number: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None
    company: str | None = None
    job_title: str | None = None
    date_of_birth: date | None = None
    profile_image_url: str | None = None
    is_active: bool = True
    roles: list[Role] = Field(default_factory=lambda: [Role.USER])
    registration_date: datetime = Field(default_factory=_utcnow)
    last_login: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles


class Resource(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    hourly_rate: Decimal | None = Field(default=None, ge=0)
    daily_rate: Decimal | None = Field(default=None, ge=0)
    capacity: int = Field(default=1, ge=1)
    category: str | None = None
    location: str | None = None
    image_url: str | None = None
    is_active: bool = True


class Reservation(UtcModel):
    id: str = Field(default_factory=_new_id)
    resource_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    description: str | None = None
    attendees: int = Field(default=1, ge=1)
    status: ReservationStatus = ReservationStatus.PENDING
    is_paid: bool = False
    price: Decimal | None = None
    is_recurring: bool = False
    recurrence_pattern: str | None = None
    recurrence_interval: int | None = None
    recurrence_end_date: datetime | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> Reservation:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def is_cancelled(self) -> bool:
        return self.status == ReservationStatus.CANCELLED


class PaymentDetails(UtcModel):
    id: str = Field(default_factory=_new_id)
    reservation_id: str
    amount: Decimal = Field(gt=0)
    currency: str = "USD"
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str | None = None
    payment_method: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime | None = None


class Review(UtcModel):
    id: str = Field(default_factory=_new_id)
    reservation_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime | None = None


class Notification(UtcModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.SYSTEM
    reservation_id: str | None = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
