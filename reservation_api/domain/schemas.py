"""Request / response DTOs for the HTTP layer."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from reservation_api.domain.models import (
    NotificationType,
    PaymentStatus,
    ReservationStatus,
    UtcModel,
)

# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str
    first_name: str = ""
    last_name: str = ""
    phone_number: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdateRequest(BaseModel):
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


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class UserView(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone_number: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None
    company: str | None = None
    job_title: str | None = None
    date_of_birth: date | None = None
    profile_image_url: str | None = None
    roles: list[str]
    is_active: bool


class AuthResponse(BaseModel):
    token: str
    expiration: datetime
    user: UserView


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class ResourceWrite(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    hourly_rate: Decimal | None = Field(default=None, ge=0)
    daily_rate: Decimal | None = Field(default=None, ge=0)
    capacity: int = Field(default=1, ge=1)
    category: str | None = None
    location: str | None = None
    image_url: str | None = None


class ResourceUpdate(ResourceWrite):
    is_active: bool = True


class ResourceFilter(UtcModel):
    category: str | None = None
    search_term: str | None = None
    min_capacity: int | None = None
    max_capacity: int | None = None
    max_hourly_rate: Decimal | None = None
    max_daily_rate: Decimal | None = None
    location: str | None = None
    is_available_now: bool | None = None
    available_from: datetime | None = None
    available_to: datetime | None = None


class ResourceView(BaseModel):
    id: str
    name: str
    description: str | None = None
    hourly_rate: Decimal | None = None
    daily_rate: Decimal | None = None
    capacity: int
    category: str | None = None
    location: str | None = None
    image_url: str | None = None
    is_active: bool
    average_rating: float | None = None
    is_available_now: bool = True
    next_available_time: datetime | None = None


# ---------------------------------------------------------------------------
# Reservations
# ---------------------------------------------------------------------------


class CreateReservationRequest(UtcModel):
    model_config = ConfigDict(extra="forbid")

    resource_id: str
    start_time: datetime
    end_time: datetime
    description: str | None = None
    attendees: int = Field(default=1, ge=1)
    is_recurring: bool = False
    recurrence_pattern: str | None = None
    recurrence_interval: int | None = Field(default=None, ge=1)
    recurrence_end_date: datetime | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> CreateReservationRequest:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def wants_recurrence(self) -> bool:
        return bool(
            self.is_recurring
            and self.recurrence_pattern
            and self.recurrence_interval
            and self.recurrence_end_date
        )


class UpdateReservationRequest(UtcModel):
    model_config = ConfigDict(extra="forbid")

    resource_id: str
    start_time: datetime
    end_time: datetime
    description: str | None = None
    attendees: int = Field(default=1, ge=1)
    status: ReservationStatus = ReservationStatus.PENDING

    @model_validator(mode="after")
    def _end_after_start(self) -> UpdateReservationRequest:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class UpdateStatusRequest(BaseModel):
    status: str


class PaymentView(BaseModel):
    id: str
    reservation_id: str
    amount: Decimal
    currency: str
    status: PaymentStatus
    transaction_id: str | None = None
    payment_method: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class ReviewView(BaseModel):
    id: str
    reservation_id: str
    user_id: str
    user_name: str = ""
    rating: int
    comment: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    resource_id: str = ""
    resource_name: str = ""


class ReservationView(BaseModel):
    id: str
    resource_id: str
    resource_name: str = ""
    user_id: str
    user_name: str = ""
    start_time: datetime
    end_time: datetime
    description: str | None = None
    attendees: int
    status: ReservationStatus
    is_paid: bool
    price: Decimal | None = None
    is_recurring: bool
    recurrence_pattern: str | None = None
    recurrence_interval: int | None = None
    recurrence_end_date: datetime | None = None
    created_at: datetime
    payment_details: PaymentView | None = None
    reviews: list[ReviewView] = Field(default_factory=list)
    average_rating: float | None = None
    resource_capacity: int = 0
    resource_image_url: str | None = None
    resource_location: str | None = None


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


class CreatePaymentRequest(BaseModel):
    reservation_id: str
    amount: Decimal = Field(gt=0)
    currency: str = "USD"
    payment_method: str = Field(min_length=1)
    # Card fields are accepted for client compatibility and never stored.
    card_number: str | None = None
    card_holder_name: str | None = None
    expiry_month: str | None = None
    expiry_year: str | None = None
    cvv: str | None = None


class UpdatePaymentStatusRequest(BaseModel):
    status: str
    transaction_id: str | None = None


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


class CreateReviewRequest(BaseModel):
    reservation_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class UpdateReviewRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class CreateNotificationRequest(BaseModel):
    user_id: str
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: NotificationType = NotificationType.SYSTEM
    reservation_id: str | None = None


class NotificationView(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    reservation_id: str | None = None
    is_read: bool
    created_at: datetime
