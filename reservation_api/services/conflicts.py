"""Service for detecting scheduling conflicts between reservations."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from reservation_api.domain.models import Reservation, ReservationStatus


class ReservationStore(Protocol):
    """The storage query the conflict checker relies on."""

    def find_overlapping(
        self,
        resource_id: str,
        start: datetime,
        end: datetime,
        exclude_id: str | None = None,
    ) -> list[Reservation]: ...


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open interval intersection of [a_start, a_end) and [b_start, b_end).

    Exact boundary touches (a_end == b_start) are NOT considered conflicts.
    """
    return a_start < b_end and b_start < a_end


def find_conflicts(
    new_start: datetime,
    new_end: datetime,
    existing: Iterable[Reservation],
) -> list[Reservation]:
    """Return non-cancelled reservations from *existing* that overlap the range."""
    return [
        reservation
        for reservation in existing
        if reservation.status != ReservationStatus.CANCELLED
        and overlaps(new_start, new_end, reservation.start_time, reservation.end_time)
    ]


def has_conflict(
    store: ReservationStore,
    resource_id: str,
    start: datetime,
    end: datetime,
    exclude_reservation_id: str | None = None,
) -> bool:
    """Return True if any non-cancelled reservation on the resource overlaps [start, end).

    ``start < end`` is the caller's responsibility.
    """
    return bool(store.find_overlapping(resource_id, start, end, exclude_reservation_id))
