"""Price calculation for a booked time window."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from reservation_api.domain.models import Resource

HOURLY_BILLING_LIMIT = timedelta(hours=24)
_CENTS = Decimal("0.01")


def calculate_price(resource: Resource, start: datetime, end: datetime) -> Decimal | None:
    """Price a booking of *resource* over [start, end).

    Hourly billing applies to windows of up to 24 hours when the resource has an
    hourly rate; otherwise the daily rate is used. Partial hours/days round up.
    Returns ``None`` when no applicable rate is configured.
    """
    duration = end - start

    if resource.hourly_rate is not None and duration <= HOURLY_BILLING_LIMIT:
        hours = math.ceil(duration / timedelta(hours=1))
        return (resource.hourly_rate * hours).quantize(_CENTS, rounding=ROUND_HALF_UP)

    if resource.daily_rate is not None:
        days = math.ceil(duration / timedelta(days=1))
        return (resource.daily_rate * days).quantize(_CENTS, rounding=ROUND_HALF_UP)

    return None
