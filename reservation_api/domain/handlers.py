"""Domain event handlers, wired up at application startup.

Every handler turns a lifecycle event into a stored Notification for the
affected user.
"""

from __future__ import annotations

import logging

from reservation_api.domain.bus import EventBus
from reservation_api.domain.events import (
    PaymentProcessed,
    PaymentStatusChanged,
    ReservationCreated,
    ReservationDeleted,
    ReservationStatusChanged,
    ReservationUpdated,
)
from reservation_api.domain.models import (
    Notification,
    NotificationType,
    PaymentStatus,
)
from reservation_api.repos.memory import (
    NotificationRepository,
    PaymentRepository,
    ReservationRepository,
    ResourceRepository,
)

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the repositories."""

    def __init__(
        self,
        bus: EventBus,
        resource_repo: ResourceRepository,
        reservation_repo: ReservationRepository,
        payment_repo: PaymentRepository,
        notification_repo: NotificationRepository,
    ) -> None:
        self.bus = bus
        self.resource_repo = resource_repo
        self.reservation_repo = reservation_repo
        self.payment_repo = payment_repo
        self.notification_repo = notification_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(ReservationCreated, self.on_reservation_created)
        self.bus.subscribe(ReservationUpdated, self.on_reservation_updated)
        self.bus.subscribe(ReservationStatusChanged, self.on_reservation_status_changed)
        self.bus.subscribe(ReservationDeleted, self.on_reservation_deleted)
        self.bus.subscribe(PaymentProcessed, self.on_payment_processed)
        self.bus.subscribe(PaymentStatusChanged, self.on_payment_status_changed)

    def _resource_name(self, resource_id: str) -> str:
        resource = self.resource_repo.get(resource_id)
        return resource.name if resource else "the resource"

    def _notify(self, notification: Notification) -> None:
        self.notification_repo.add(notification)
        logger.debug(
            "notification stored",
            extra={
                "extra_fields": {
                    "notification_id": notification.id,
                    "user_id": notification.user_id,
                    "title": notification.title,
                }
            },
        )

    # ------------------------------------------------------------------
    # Reservation handlers
    # ------------------------------------------------------------------

    def on_reservation_created(self, event: ReservationCreated) -> None:
        stored = self.reservation_repo.get(event.reservation_id)
        if stored is None:
            return

        name = self._resource_name(stored.resource_id)
        if event.occurrence:
            title = "Recurring Reservation"
            message = f"A recurring reservation for {name} has been created."
        else:
            title = "New Reservation"
            message = f"Your reservation for {name} has been created and is pending confirmation."

        self._notify(
            Notification(
                user_id=stored.user_id,
                title=title,
                message=message,
                type=NotificationType.RESERVATION,
                reservation_id=stored.id,
            )
        )

    def on_reservation_updated(self, event: ReservationUpdated) -> None:
        stored = self.reservation_repo.get(event.reservation_id)
        if stored is None:
            return

        self._notify(
            Notification(
                user_id=stored.user_id,
                title="Reservation Updated",
                message=f"Your reservation for {self._resource_name(stored.resource_id)} has been updated.",
                type=NotificationType.RESERVATION,
                reservation_id=stored.id,
            )
        )

    def on_reservation_status_changed(self, event: ReservationStatusChanged) -> None:
        stored = self.reservation_repo.get(event.reservation_id)
        if stored is None:
            return

        self._notify(
            Notification(
                user_id=stored.user_id,
                title="Reservation Status Changed",
                message=(
                    f"Your reservation for {self._resource_name(stored.resource_id)} "
                    f"is now {event.new_status}."
                ),
                type=NotificationType.RESERVATION,
                reservation_id=stored.id,
            )
        )

    def on_reservation_deleted(self, event: ReservationDeleted) -> None:
        self._notify(
            Notification(
                user_id=event.user_id,
                title="Reservation Deleted",
                message=f"Your reservation for {event.resource_name} has been deleted.",
                type=NotificationType.RESERVATION,
            )
        )

    # ------------------------------------------------------------------
    # Payment handlers
    # ------------------------------------------------------------------

    def on_payment_processed(self, event: PaymentProcessed) -> None:
        payment = self.payment_repo.get(event.payment_id)
        if payment is None:
            return
        reservation = self.reservation_repo.get(payment.reservation_id)
        if reservation is None:
            return

        self._notify(
            Notification(
                user_id=reservation.user_id,
                title="Payment Successful",
                message=(
                    f"Your payment of {payment.amount} {payment.currency} for "
                    f"{self._resource_name(reservation.resource_id)} has been processed successfully."
                ),
                type=NotificationType.PAYMENT,
                reservation_id=reservation.id,
            )
        )

    def on_payment_status_changed(self, event: PaymentStatusChanged) -> None:
        payment = self.payment_repo.get(event.payment_id)
        if payment is None:
            return
        reservation = self.reservation_repo.get(payment.reservation_id)
        if reservation is None:
            return

        if event.new_status == PaymentStatus.COMPLETED:
            title = "Payment Completed"
            message = f"Your payment of {payment.amount} {payment.currency} has been processed successfully."
        elif event.new_status in (PaymentStatus.FAILED, PaymentStatus.REFUNDED):
            title = f"Payment {event.new_status}"
            message = (
                f"Your payment of {payment.amount} {payment.currency} "
                f"has been {event.new_status.lower()}."
            )
        else:
            return

        self._notify(
            Notification(
                user_id=reservation.user_id,
                title=title,
                message=message,
                type=NotificationType.PAYMENT,
                reservation_id=reservation.id,
            )
        )
