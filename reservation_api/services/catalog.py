"""Resource catalog: browsing, filtering, availability and ratings."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from reservation_api.domain.errors import NotFoundError, ValidationFailed
from reservation_api.domain.models import Reservation, ReservationStatus, Resource
from reservation_api.domain.schemas import (
    ResourceFilter,
    ResourceUpdate,
    ResourceView,
    ResourceWrite,
)
from reservation_api.repos.memory import (
    NotificationRepository,
    PaymentRepository,
    ReservationRepository,
    ResourceRepository,
    ReviewRepository,
)
from reservation_api.services.conflicts import find_conflicts

logger = logging.getLogger(__name__)


def next_available_time(reservations: list[Reservation], at: datetime) -> datetime | None:
    """First moment at or after *at* not covered by a non-cancelled reservation.

    Returns None when the resource is already free at *at*. Back-to-back
    bookings are walked through, so the answer is the end of the occupied run.
    """
    active = sorted(
        (r for r in reservations if r.status != ReservationStatus.CANCELLED),
        key=lambda r: r.start_time,
    )
    candidate = at
    for reservation in active:
        if reservation.start_time > candidate:
            break
        if reservation.end_time > candidate:
            candidate = reservation.end_time
    return None if candidate == at else candidate


class CatalogService:
    def __init__(
        self,
        resource_repo: ResourceRepository,
        reservation_repo: ReservationRepository,
        review_repo: ReviewRepository,
        payment_repo: PaymentRepository,
        notification_repo: NotificationRepository,
    ) -> None:
        self.resource_repo = resource_repo
        self.reservation_repo = reservation_repo
        self.review_repo = review_repo
        self.payment_repo = payment_repo
        self.notification_repo = notification_repo

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def average_rating(self, resource_id: str) -> float | None:
        reservation_ids = [r.id for r in self.reservation_repo.list_for_resource(resource_id)]
        ratings = [rv.rating for rv in self.review_repo.list_for_reservations(reservation_ids)]
        if not ratings:
            return None
        return sum(ratings) / len(ratings)

    def to_view(
        self,
        resource: Resource,
        window_start: datetime | None = None,
        window_end: datetime | None = None,
    ) -> ResourceView:
        """Describe *resource* with its availability over a window (default: now)."""
        now = datetime.now(timezone.utc)
        start = window_start or now
        end = window_end or start
        reservations = self.reservation_repo.list_for_resource(resource.id)

        if end > start:
            busy = bool(find_conflicts(start, end, reservations))
        else:
            busy = next_available_time(reservations, start) is not None

        return ResourceView(
            **resource.model_dump(),
            average_rating=self.average_rating(resource.id),
            is_available_now=not busy,
            next_available_time=next_available_time(reservations, start),
        )

    def get(self, resource_id: str) -> Resource:
        resource = self.resource_repo.get(resource_id)
        if resource is None:
            raise NotFoundError("Resource not found")
        return resource

    def search(self, filters: ResourceFilter, now: datetime | None = None) -> list[Resource]:
        """Active resources matching every filter that is set."""
        now = now or datetime.now(timezone.utc)
        results = []
        for resource in self.resource_repo.list_active():
            if filters.category and resource.category != filters.category:
                continue
            if filters.search_term and not _matches_term(resource, filters.search_term):
                continue
            if filters.min_capacity is not None and resource.capacity < filters.min_capacity:
                continue
            if filters.max_capacity is not None and resource.capacity > filters.max_capacity:
                continue
            if (
                filters.max_hourly_rate is not None
                and resource.hourly_rate is not None
                and resource.hourly_rate > filters.max_hourly_rate
            ):
                continue
            if (
                filters.max_daily_rate is not None
                and resource.daily_rate is not None
                and resource.daily_rate > filters.max_daily_rate
            ):
                continue
            if filters.location and resource.location != filters.location:
                continue

            reservations = self.reservation_repo.list_for_resource(resource.id)
            if filters.is_available_now and next_available_time(reservations, now) is not None:
                continue
            if (
                filters.available_from is not None
                and filters.available_to is not None
                and find_conflicts(filters.available_from, filters.available_to, reservations)
            ):
                continue

            results.append(resource)
        return results

    def availability(
        self, start: datetime, end: datetime, resource_id: str | None = None
    ) -> list[ResourceView]:
        if start >= end:
            raise ValidationFailed("End date must be after start date.")
        resources = self.resource_repo.list_active()
        if resource_id is not None:
            resources = [r for r in resources if r.id == resource_id]
        return [self.to_view(r, start, end) for r in resources]

    def categories(self) -> list[str]:
        return sorted({r.category for r in self.resource_repo.list_active() if r.category})

    def locations(self) -> list[str]:
        return sorted({r.location for r in self.resource_repo.list_active() if r.location})

    # ------------------------------------------------------------------
    # Write side (admin)
    # ------------------------------------------------------------------

    def create(self, payload: ResourceWrite) -> Resource:
        resource = Resource(**payload.model_dump(), is_active=True)
        self.resource_repo.add(resource)
        logger.info("resource created", extra={"extra_fields": {"resource_id": resource.id}})
        return resource

    def update(self, resource_id: str, payload: ResourceUpdate) -> Resource:
        resource = self.get(resource_id)
        for field, value in payload.model_dump().items():
            setattr(resource, field, value)
        logger.info("resource updated", extra={"extra_fields": {"resource_id": resource.id}})
        return resource

    def delete(self, resource_id: str, now: datetime | None = None) -> bool:
        """Remove a resource, or deactivate it while future reservations exist.

        A removed resource takes its past reservations with it, along with
        their payments, reviews and notifications.

        Returns True when the resource was removed, False when deactivated.
        """
        now = now or datetime.now(timezone.utc)
        resource = self.get(resource_id)
        has_future = any(
            r.start_time > now for r in self.reservation_repo.list_for_resource(resource.id)
        )
        if has_future:
            resource.is_active = False
            logger.info(
                "resource deactivated instead of deleted",
                extra={"extra_fields": {"resource_id": resource.id}},
            )
            return False

        reservations = self.reservation_repo.list_for_resource(resource.id)
        for reservation in reservations:
            self.payment_repo.delete_for_reservation(reservation.id)
            self.notification_repo.delete_for_reservation(reservation.id)
            self.review_repo.delete_for_reservation(reservation.id)
            self.reservation_repo.delete(reservation.id)
        self.resource_repo.delete(resource.id)
        logger.info(
            "resource deleted",
            extra={"extra_fields": {"resource_id": resource.id, "reservations": len(reservations)}},
        )
        return True


def _matches_term(resource: Resource, term: str) -> bool:
    term = term.lower()
    haystacks = (resource.name, resource.description, resource.location)
    return any(h and term in h.lower() for h in haystacks)
