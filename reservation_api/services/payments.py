"""Simulated payment processing for reservations."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from reservation_api.auth.context import CurrentUser, ensure_owner_or_admin
from reservation_api.domain.bus import EventBus
from reservation_api.domain.errors import (
    DuplicateError,
    InvalidStatusError,
    NotFoundError,
    ValidationFailed,
)
from reservation_api.domain.events import PaymentProcessed, PaymentStatusChanged
from reservation_api.domain.models import PaymentDetails, PaymentStatus, ReservationStatus
from reservation_api.domain.schemas import CreatePaymentRequest
from reservation_api.repos.memory import PaymentRepository, ReservationRepository

logger = logging.getLogger(__name__)


def new_transaction_id() -> str:
    return f"TRANS-{uuid.uuid4().hex[:8].upper()}"


class PaymentService:
    def __init__(
        self,
        bus: EventBus,
        reservation_repo: ReservationRepository,
        payment_repo: PaymentRepository,
    ) -> None:
        self.bus = bus
        self.reservation_repo = reservation_repo
        self.payment_repo = payment_repo

    def list_for_actor(self, actor: CurrentUser) -> list[PaymentDetails]:
        payments = self.payment_repo.list_all()
        if not actor.is_admin:
            owned = {r.id for r in self.reservation_repo.list_for_user(actor.id)}
            payments = [p for p in payments if p.reservation_id in owned]
        return sorted(payments, key=lambda p: p.created_at, reverse=True)

    def get_for_actor(self, actor: CurrentUser, payment_id: str) -> PaymentDetails:
        payment = self.payment_repo.get(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        reservation = self.reservation_repo.get(payment.reservation_id)
        ensure_owner_or_admin(actor, reservation.user_id if reservation else None)
        return payment

    def process_payment(self, actor: CurrentUser, request: CreatePaymentRequest) -> PaymentDetails:
        """Charge for a reservation and confirm it.

        There is no gateway behind this: the charge always succeeds and is
        recorded with a generated transaction id.
        """
        reservation = self.reservation_repo.get(request.reservation_id)
        if reservation is None:
            raise ValidationFailed("Reservation not found")
        ensure_owner_or_admin(actor, reservation.user_id)

        # The resource lock orders this against status changes on the reservation.
        with self.reservation_repo.lock_for(reservation.resource_id), self.payment_repo.write_lock:
            if self.payment_repo.get_for_reservation(reservation.id) is not None:
                raise DuplicateError("Payment already exists for this reservation")
            if reservation.is_cancelled:
                raise ValidationFailed("A cancelled reservation cannot be paid for")

            now = datetime.now(timezone.utc)
            payment = PaymentDetails(
                reservation_id=reservation.id,
                amount=request.amount,
                currency=request.currency,
                payment_method=request.payment_method,
                status=PaymentStatus.COMPLETED,
                transaction_id=new_transaction_id(),
                created_at=now,
            )
            self.payment_repo.add(payment)

            reservation.is_paid = True
            reservation.status = ReservationStatus.CONFIRMED
            reservation.updated_at = now

        logger.info(
            "payment processed",
            extra={
                "extra_fields": {
                    "payment_id": payment.id,
                    "reservation_id": reservation.id,
                    "amount": str(payment.amount),
                    "currency": payment.currency,
                }
            },
        )
        self.bus.publish(PaymentProcessed(payment_id=payment.id))
        return payment

    def update_status(
        self, payment_id: str, status: str, transaction_id: str | None = None
    ) -> PaymentDetails:
        payment = self.payment_repo.get(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        try:
            new_status = PaymentStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in PaymentStatus)
            raise InvalidStatusError(f"Invalid payment status. Allowed values: {allowed}") from None

        now = datetime.now(timezone.utc)
        payment.status = new_status
        payment.updated_at = now
        if transaction_id is not None:
            payment.transaction_id = transaction_id

        reservation = self.reservation_repo.get(payment.reservation_id)
        if reservation is not None:
            if new_status == PaymentStatus.COMPLETED:
                reservation.is_paid = True
                if not reservation.is_cancelled:
                    reservation.status = ReservationStatus.CONFIRMED
                reservation.updated_at = now
            elif new_status in (PaymentStatus.FAILED, PaymentStatus.REFUNDED):
                reservation.is_paid = False
                reservation.updated_at = now

        logger.info(
            "payment status changed",
            extra={"extra_fields": {"payment_id": payment.id, "status": new_status.value}},
        )
        self.bus.publish(PaymentStatusChanged(payment_id=payment.id, new_status=new_status.value))
        return payment
