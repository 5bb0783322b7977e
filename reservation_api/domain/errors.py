"""Errors raised by the service layer.

Each carries the HTTP status the API answers with; ``main.py`` installs a
single exception handler that renders them as ``{"detail": message}``.
"""

from __future__ import annotations

from datetime import datetime


class BookingError(Exception):
    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(BookingError):
    status_code = 404


class ValidationFailed(BookingError):
    status_code = 400


class AuthenticationFailed(BookingError):
    status_code = 401


class PermissionDeniedError(BookingError):
    status_code = 403


class DuplicateError(BookingError):
    status_code = 409


class InvalidStatusError(BookingError):
    status_code = 400


class CapacityExceededError(BookingError):
    """Raised when a booking asks for more attendees than the resource holds."""

    def __init__(self, capacity: int, attendees: int) -> None:
        self.capacity = capacity
        self.attendees = attendees
        super().__init__(
            f"The resource capacity is {capacity}, but you requested for {attendees} attendees."
        )


class ReservationConflictError(BookingError):
    """Raised when the requested window overlaps a non-cancelled reservation."""

    def __init__(
        self,
        resource_id: str,
        start_time: datetime,
        end_time: datetime,
        conflicting_reservation_id: str | None = None,
    ) -> None:
        self.resource_id = resource_id
        self.start_time = start_time
        self.end_time = end_time
        self.conflicting_reservation_id = conflicting_reservation_id
        super().__init__(
            "There is already a reservation for this resource during the requested time period."
        )
