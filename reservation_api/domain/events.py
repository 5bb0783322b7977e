"""Domain events emitted during the reservation lifecycle."""

from __future__ import annotations

from pydantic import BaseModel


class ReservationCreated(BaseModel):
    """Fired once per persisted reservation, including recurring occurrences."""

    reservation_id: str
    occurrence: bool = False


class ReservationUpdated(BaseModel):
    reservation_id: str


class ReservationStatusChanged(BaseModel):
    reservation_id: str
    old_status: str
    new_status: str


class ReservationDeleted(BaseModel):
    """Fired after a reservation and its dependents were removed.

    The reservation no longer exists, so the event carries what the
    notification needs.
    """

    user_id: str
    resource_name: str


class PaymentProcessed(BaseModel):
    """Fired when a payment was accepted at creation time."""

    payment_id: str


class PaymentStatusChanged(BaseModel):
    """Fired when an admin moves a payment to a new status."""

    payment_id: str
    new_status: str
