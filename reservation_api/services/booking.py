"""Booking workflow: create, change, cancel and delete reservations.

The conflict check and the insert it guards run under the reservation
repository's per-resource lock, so two requests for the same resource and
overlapping windows cannot both succeed. Status changes take the same lock,
so an edit cannot reopen a reservation cancelled while it was waiting.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack, contextmanager
from datetime import datetime, timezone

from reservation_api.auth.context import CurrentUser, ensure_owner_or_admin
from reservation_api.domain.bus import EventBus
from reservation_api.domain.errors import (
    CapacityExceededError,
    InvalidStatusError,
    NotFoundError,
    ReservationConflictError,
    ValidationFailed,
)
from reservation_api.domain.events import (
    ReservationCreated,
    ReservationDeleted,
    ReservationStatusChanged,
    ReservationUpdated,
)
from reservation_api.domain.models import Reservation, ReservationStatus, Resource
from reservation_api.domain.schemas import (
    CreateReservationRequest,
    UpdateReservationRequest,
)
from reservation_api.repos.memory import (
    NotificationRepository,
    PaymentRepository,
    ReservationRepository,
    ResourceRepository,
    ReviewRepository,
)
from reservation_api.services.pricing import calculate_price
from reservation_api.services.recurrence import expand_recurrence

logger = logging.getLogger(__name__)

ALLOWED_STATUSES = ", ".join(s.value for s in ReservationStatus)


def parse_status(value: str) -> ReservationStatus:
    try:
        return ReservationStatus(value)
    except ValueError:
        raise InvalidStatusError(f"Invalid status value. Allowed values: {ALLOWED_STATUSES}") from None


class BookingService:
    def __init__(
        self,
        bus: EventBus,
        resource_repo: ResourceRepository,
        reservation_repo: ReservationRepository,
        payment_repo: PaymentRepository,
        review_repo: ReviewRepository,
        notification_repo: NotificationRepository,
    ) -> None:
        self.bus = bus
        self.resource_repo = resource_repo
        self.reservation_repo = reservation_repo
        self.payment_repo = payment_repo
        self.review_repo = review_repo
        self.notification_repo = notification_repo

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_for_actor(self, actor: CurrentUser, reservation_id: str) -> Reservation:
        reservation = self.reservation_repo.get(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation not found")
        ensure_owner_or_admin(actor, reservation.user_id)
        return reservation

    def list_for_actor(
        self, actor: CurrentUser, upcoming_after: datetime | None = None
    ) -> list[Reservation]:
        """Own reservations (all for admins); optionally only those starting after a moment."""
        if actor.is_admin:
            reservations = self.reservation_repo.list_all()
        else:
            reservations = self.reservation_repo.list_for_user(actor.id)

        if upcoming_after is None:
            return sorted(reservations, key=lambda r: r.start_time, reverse=True)
        upcoming = [r for r in reservations if r.start_time > upcoming_after]
        return sorted(upcoming, key=lambda r: r.start_time)

    def list_for_user(self, user_id: str) -> list[Reservation]:
        return sorted(
            self.reservation_repo.list_for_user(user_id),
            key=lambda r: r.start_time,
            reverse=True,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @contextmanager
    def _locked(self, *resource_ids: str):
        """Hold the per-resource locks for every id given, taken in sorted order."""
        with ExitStack() as stack:
            for resource_id in sorted(set(resource_ids)):
                stack.enter_context(self.reservation_repo.lock_for(resource_id))
            yield

    def _bookable_resource(
        self, resource_id: str, attendees: int, require_active: bool = True
    ) -> Resource:
        resource = self.resource_repo.get(resource_id)
        if resource is None:
            raise ValidationFailed("The specified resource does not exist.")
        if require_active and not resource.is_active:
            raise ValidationFailed("The specified resource is not available for booking.")
        if attendees > resource.capacity:
            raise CapacityExceededError(resource.capacity, attendees)
        return resource

    def create_reservation(
        self, actor: CurrentUser, request: CreateReservationRequest
    ) -> tuple[Reservation, list[Reservation]]:
        """Book a resource for *actor*.

        Returns the reservation and the follow-on occurrences generated for a
        recurring booking (empty for one-off bookings).

        Raises:
            ValidationFailed: unknown or inactive resource.
            CapacityExceededError: more attendees than the resource holds.
            ReservationConflictError: the window is already taken.
        """
        resource = self._bookable_resource(request.resource_id, request.attendees)

        with self.reservation_repo.lock_for(resource.id):
            conflicts = self.reservation_repo.find_overlapping(
                resource.id, request.start_time, request.end_time
            )
            if conflicts:
                logger.info(
                    "booking rejected: conflict",
                    extra={
                        "extra_fields": {
                            "resource_id": resource.id,
                            "user_id": actor.id,
                            "start_time": request.start_time.isoformat(),
                            "end_time": request.end_time.isoformat(),
                            "conflicting_reservation_id": conflicts[0].id,
                        }
                    },
                )
                raise ReservationConflictError(
                    resource.id,
                    request.start_time,
                    request.end_time,
                    conflicting_reservation_id=conflicts[0].id,
                )

            reservation = Reservation(
                resource_id=resource.id,
                user_id=actor.id,
                start_time=request.start_time,
                end_time=request.end_time,
                description=request.description,
                attendees=request.attendees,
                is_recurring=request.is_recurring,
                recurrence_pattern=request.recurrence_pattern,
                recurrence_interval=request.recurrence_interval,
                recurrence_end_date=request.recurrence_end_date,
                status=ReservationStatus.PENDING,
                price=calculate_price(resource, request.start_time, request.end_time),
            )
            self.reservation_repo.add(reservation)

            occurrences: list[Reservation] = []
            if request.wants_recurrence:
                occurrences = expand_recurrence(
                    reservation,
                    request.recurrence_pattern,
                    request.recurrence_interval,
                    request.recurrence_end_date,
                    store=self.reservation_repo,
                    resource=resource,
                )
                self.reservation_repo.add_many(occurrences)

        logger.info(
            "reservation created",
            extra={
                "extra_fields": {
                    "reservation_id": reservation.id,
                    "resource_id": resource.id,
                    "user_id": actor.id,
                    "occurrences": len(occurrences),
                }
            },
        )

        self.bus.publish(ReservationCreated(reservation_id=reservation.id))
        for occurrence in occurrences:
            self.bus.publish(ReservationCreated(reservation_id=occurrence.id, occurrence=True))

        return reservation, occurrences

    def update_reservation(
        self, actor: CurrentUser, reservation_id: str, request: UpdateReservationRequest
    ) -> Reservation:
        reservation = self.get_for_actor(actor, reservation_id)
        if reservation.is_cancelled and request.status != ReservationStatus.CANCELLED:
            raise InvalidStatusError("A cancelled reservation cannot be reopened.")

        # Existing bookings on a deactivated resource stay editable.
        resource = self._bookable_resource(
            request.resource_id,
            request.attendees,
            require_active=request.resource_id != reservation.resource_id,
        )

        with self._locked(reservation.resource_id, resource.id):
            # A concurrent cancel may have landed while waiting for the lock.
            if reservation.is_cancelled and request.status != ReservationStatus.CANCELLED:
                raise InvalidStatusError("A cancelled reservation cannot be reopened.")

            if request.status != ReservationStatus.CANCELLED:
                conflicts = self.reservation_repo.find_overlapping(
                    resource.id,
                    request.start_time,
                    request.end_time,
                    exclude_id=reservation.id,
                )
                if conflicts:
                    raise ReservationConflictError(
                        resource.id,
                        request.start_time,
                        request.end_time,
                        conflicting_reservation_id=conflicts[0].id,
                    )

            window_changed = (
                reservation.start_time != request.start_time
                or reservation.end_time != request.end_time
                or reservation.resource_id != request.resource_id
            )
            if window_changed:
                reservation.price = calculate_price(resource, request.start_time, request.end_time)

            reservation.start_time = request.start_time
            reservation.end_time = request.end_time
            reservation.description = request.description
            reservation.resource_id = request.resource_id
            reservation.attendees = request.attendees
            reservation.status = request.status
            reservation.updated_at = datetime.now(timezone.utc)

        logger.info(
            "reservation updated",
            extra={"extra_fields": {"reservation_id": reservation.id, "user_id": actor.id}},
        )
        self.bus.publish(ReservationUpdated(reservation_id=reservation.id))
        return reservation

    def change_status(self, actor: CurrentUser, reservation_id: str, status: str) -> Reservation:
        reservation = self.get_for_actor(actor, reservation_id)
        new_status = parse_status(status)

        with self._locked(reservation.resource_id):
            if reservation.is_cancelled and new_status != ReservationStatus.CANCELLED:
                raise InvalidStatusError("A cancelled reservation cannot be reopened.")

            old_status = reservation.status
            reservation.status = new_status
            reservation.updated_at = datetime.now(timezone.utc)

        logger.info(
            "reservation status changed",
            extra={
                "extra_fields": {
                    "reservation_id": reservation.id,
                    "old_status": str(old_status),
                    "new_status": str(new_status),
                }
            },
        )
        self.bus.publish(
            ReservationStatusChanged(
                reservation_id=reservation.id,
                old_status=old_status.value,
                new_status=new_status.value,
            )
        )
        return reservation

    def delete_reservation(self, actor: CurrentUser, reservation_id: str) -> None:
        """Remove a reservation together with its payment, reviews and notifications."""
        reservation = self.get_for_actor(actor, reservation_id)
        resource = self.resource_repo.get(reservation.resource_id)

        self.payment_repo.delete_for_reservation(reservation.id)
        self.notification_repo.delete_for_reservation(reservation.id)
        self.review_repo.delete_for_reservation(reservation.id)
        self.reservation_repo.delete(reservation.id)

        logger.info(
            "reservation deleted",
            extra={"extra_fields": {"reservation_id": reservation.id, "user_id": actor.id}},
        )
        self.bus.publish(
            ReservationDeleted(
                user_id=reservation.user_id,
                resource_name=resource.name if resource else "the resource",
            )
        )
