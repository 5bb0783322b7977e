"""Tests for expanding recurring reservations."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from reservation_api import config
from reservation_api.domain.models import Reservation, ReservationStatus, Resource
from reservation_api.repos.memory import ReservationRepository
from reservation_api.services.recurrence import expand_recurrence, recurrence_step

_START = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def _resource() -> Resource:
    return Resource(name="Studio", capacity=10, hourly_rate=Decimal("50.00"))


def _original(resource: Resource, start: datetime = _START, hours: int = 1) -> Reservation:
    return Reservation(
        resource_id=resource.id,
        user_id="user-1",
        start_time=start,
        end_time=start + timedelta(hours=hours),
        description="Weekly sync",
        attendees=3,
        is_recurring=True,
    )


def test_recurrence_step_known_patterns():
    assert recurrence_step("daily", 2) == timedelta(days=2)
    assert recurrence_step("weekly", 1) == timedelta(days=7)
    assert recurrence_step("monthly", 3) == relativedelta(months=3)


def test_recurrence_step_is_case_insensitive():
    assert recurrence_step("Weekly", 1) == timedelta(days=7)
    assert recurrence_step(" DAILY ", 1) == timedelta(days=1)


def test_recurrence_step_unknown_pattern():
    assert recurrence_step("yearly", 1) is None


def test_weekly_skips_taken_slot():
    """Four weekly slots from 2024-01-01, the third already booked: weeks 2 and 4 are generated."""
    resource = _resource()
    store = ReservationRepository()
    original = _original(resource)
    store.add(original)

    taken = Reservation(
        resource_id=resource.id,
        user_id="someone-else",
        start_time=_START + timedelta(weeks=2),
        end_time=_START + timedelta(weeks=2, hours=1),
    )
    store.add(taken)

    occurrences = expand_recurrence(
        original, "weekly", 1, _START + timedelta(weeks=3), store=store, resource=resource
    )

    starts = [o.start_time for o in occurrences]
    assert starts == [_START + timedelta(weeks=1), _START + timedelta(weeks=3)]
    # The original plus two occurrences: three bookings in total.
    assert len(occurrences) + 1 == 3


def test_end_date_is_inclusive():
    resource = _resource()
    store = ReservationRepository()
    original = _original(resource)

    occurrences = expand_recurrence(
        original, "daily", 1, _START + timedelta(days=2), store=store, resource=resource
    )
    assert [o.start_time for o in occurrences] == [
        _START + timedelta(days=1),
        _START + timedelta(days=2),
    ]


def test_end_date_before_first_step_yields_nothing():
    resource = _resource()
    original = _original(resource)
    occurrences = expand_recurrence(
        original, "weekly", 1, _START + timedelta(days=3), store=ReservationRepository(), resource=resource
    )
    assert occurrences == []


def test_interval_multiplies_step():
    resource = _resource()
    original = _original(resource)
    occurrences = expand_recurrence(
        original, "daily", 3, _START + timedelta(days=9), store=ReservationRepository(), resource=resource
    )
    assert [o.start_time.day for o in occurrences] == [4, 7, 10]


def test_monthly_steps_from_previous_occurrence():
    """Jan 31 -> Feb 29 (2024 is a leap year) -> Mar 29: the clamped day carries forward."""
    resource = _resource()
    start = datetime(2024, 1, 31, 9, 0, tzinfo=timezone.utc)
    original = _original(resource, start=start)

    occurrences = expand_recurrence(
        original,
        "monthly",
        1,
        datetime(2024, 3, 31, tzinfo=timezone.utc),
        store=ReservationRepository(),
        resource=resource,
    )

    assert [o.start_time for o in occurrences] == [
        datetime(2024, 2, 29, 9, 0, tzinfo=timezone.utc),
        datetime(2024, 3, 29, 9, 0, tzinfo=timezone.utc),
    ]


def test_unknown_pattern_generates_nothing():
    resource = _resource()
    original = _original(resource)
    occurrences = expand_recurrence(
        original, "fortnightly", 1, _START + timedelta(weeks=8), store=ReservationRepository(), resource=resource
    )
    assert occurrences == []


def test_non_positive_interval_generates_nothing():
    resource = _resource()
    original = _original(resource)
    occurrences = expand_recurrence(
        original, "daily", 0, _START + timedelta(days=5), store=ReservationRepository(), resource=resource
    )
    assert occurrences == []


def test_occurrences_copy_details_and_are_not_recurring():
    resource = _resource()
    original = _original(resource, hours=2)
    store = ReservationRepository()

    occurrences = expand_recurrence(
        original, "weekly", 1, _START + timedelta(weeks=1), store=store, resource=resource
    )

    assert len(occurrences) == 1
    occurrence = occurrences[0]
    assert occurrence.id != original.id
    assert occurrence.resource_id == resource.id
    assert occurrence.user_id == "user-1"
    assert occurrence.description == "Weekly sync"
    assert occurrence.attendees == 3
    assert occurrence.is_recurring is False
    assert occurrence.recurrence_pattern is None
    assert occurrence.status == ReservationStatus.PENDING
    assert occurrence.end_time - occurrence.start_time == timedelta(hours=2)
    assert occurrence.price == Decimal("100.00")
    # Expansion does not persist anything.
    assert store.list_all() == []


def test_occurrences_do_not_overlap_each_other():
    """A 36-hour booking repeated daily would collide with its own previous occurrence."""
    resource = Resource(name="Hall", capacity=50, daily_rate=Decimal("200.00"))
    original = _original(resource, hours=36)

    occurrences = expand_recurrence(
        original, "daily", 1, _START + timedelta(days=4), store=ReservationRepository(), resource=resource
    )

    for i, a in enumerate(occurrences):
        for b in occurrences[i + 1 :]:
            assert not (a.start_time < b.end_time and b.start_time < a.end_time)


def test_series_is_capped_at_occurrence_limit():
    resource = _resource()
    original = _original(resource)
    occurrences = expand_recurrence(
        original,
        "daily",
        1,
        _START + timedelta(days=365 * 5),
        store=ReservationRepository(),
        resource=resource,
        max_occurrences=10,
    )
    assert len(occurrences) == 10
    assert occurrences[-1].start_time == _START + timedelta(days=10)


def test_default_occurrence_limit_comes_from_config():
    resource = _resource()
    original = _original(resource)
    occurrences = expand_recurrence(
        original,
        "daily",
        1,
        _START + timedelta(days=365 * 20),
        store=ReservationRepository(),
        resource=resource,
    )
    assert len(occurrences) == config.MAX_RECURRENCE_OCCURRENCES


def test_skipped_slots_count_towards_limit():
    resource = _resource()
    store = ReservationRepository()
    original = _original(resource)
    store.add(
        Reservation(
            resource_id=resource.id,
            user_id="someone-else",
            start_time=_START + timedelta(days=1),
            end_time=_START + timedelta(days=1, hours=1),
        )
    )

    occurrences = expand_recurrence(
        original, "daily", 1, _START + timedelta(days=30), store=store, resource=resource, max_occurrences=3
    )
    assert [o.start_time for o in occurrences] == [
        _START + timedelta(days=2),
        _START + timedelta(days=3),
    ]
