"""Service for expanding a recurring reservation into its follow-on occurrences."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from reservation_api import config
from reservation_api.domain.models import Reservation, ReservationStatus, Resource
from reservation_api.services.conflicts import ReservationStore, has_conflict, overlaps
from reservation_api.services.pricing import calculate_price

logger = logging.getLogger(__name__)

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"

PATTERNS = (DAILY, WEEKLY, MONTHLY)


def recurrence_step(pattern: str, interval: int) -> timedelta | relativedelta | None:
    """Return the offset between two occurrences, or None for an unknown pattern."""
    pattern = pattern.strip().lower()
    if pattern == DAILY:
        return timedelta(days=interval)
    if pattern == WEEKLY:
        return timedelta(days=7 * interval)
    if pattern == MONTHLY:
        return relativedelta(months=interval)
    return None


def expand_recurrence(
    original: Reservation,
    pattern: str,
    interval: int,
    end_date: datetime,
    store: ReservationStore,
    resource: Resource,
    max_occurrences: int | None = None,
) -> list[Reservation]:
    """Generate the occurrences that follow *original* up to *end_date*.

    The original's own slot is not part of the result. Each step is applied
    to the previous occurrence, so monthly series that hit a short month keep
    the clamped day (Jan 31 -> Feb 29 -> Mar 29). Occurrences whose window is
    already taken (by a stored reservation or an earlier occurrence in this
    batch) are skipped. At most *max_occurrences* slots are considered
    (``config.MAX_RECURRENCE_OCCURRENCES`` by default), skipped ones included.
    The returned reservations are not persisted.
    """
    if interval < 1:
        return []
    step = recurrence_step(pattern, interval)
    if step is None:
        logger.warning(
            "unknown recurrence pattern, no occurrences generated",
            extra={"extra_fields": {"reservation_id": original.id, "pattern": pattern}},
        )
        return []

    limit = config.MAX_RECURRENCE_OCCURRENCES if max_occurrences is None else max_occurrences
    occurrences: list[Reservation] = []
    start_time = original.start_time
    end_time = original.end_time

    for _ in range(limit):
        start_time = start_time + step
        end_time = end_time + step

        if start_time > end_date:
            break

        # Accepted occurrences are disjoint and ordered, so only the latest can reach this slot.
        previous = occurrences[-1] if occurrences else None
        if (
            previous is not None
            and overlaps(start_time, end_time, previous.start_time, previous.end_time)
        ) or has_conflict(store, original.resource_id, start_time, end_time):
            logger.info(
                "skipping conflicting occurrence",
                extra={
                    "extra_fields": {
                        "reservation_id": original.id,
                        "resource_id": original.resource_id,
                        "start_time": start_time.isoformat(),
                    }
                },
            )
            continue

        occurrences.append(
            Reservation(
                resource_id=original.resource_id,
                user_id=original.user_id,
                start_time=start_time,
                end_time=end_time,
                description=original.description,
                attendees=original.attendees,
                is_recurring=False,
                status=ReservationStatus.PENDING,
                price=calculate_price(resource, start_time, end_time),
            )
        )
    else:
        if start_time + step <= end_date:
            logger.warning(
                "recurrence truncated at occurrence limit",
                extra={"extra_fields": {"reservation_id": original.id, "limit": limit}},
            )

    return occurrences
