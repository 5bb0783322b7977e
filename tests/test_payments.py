"""Tests for simulated payment processing."""

from __future__ import annotations

import re
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from reservation_api.domain.errors import (
    DuplicateError,
    InvalidStatusError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailed,
)
from reservation_api.domain.models import NotificationType, PaymentStatus, ReservationStatus
from reservation_api.domain.schemas import CreatePaymentRequest, CreateReservationRequest
from reservation_api.services.payments import new_transaction_id

from conftest import ADMIN, ALICE, BOB

_START = datetime(2024, 3, 4, 14, 0, tzinfo=timezone.utc)


@pytest.fixture()
def reservation(env, room):
    reservation, _ = env.booking.create_reservation(
        ALICE,
        CreateReservationRequest(
            resource_id=room.id,
            start_time=_START,
            end_time=_START + timedelta(hours=2),
        ),
    )
    return reservation


def _pay(reservation_id: str, amount: str = "100.00") -> CreatePaymentRequest:
    return CreatePaymentRequest(
        reservation_id=reservation_id,
        amount=Decimal(amount),
        payment_method="card",
        card_number="4111111111111111",
        cvv="123",
    )


def test_transaction_id_format():
    assert re.fullmatch(r"TRANS-[0-9A-F]{8}", new_transaction_id())


def test_process_payment_confirms_reservation(env, reservation):
    payment = env.payments.process_payment(ALICE, _pay(reservation.id))

    assert payment.status == PaymentStatus.COMPLETED
    assert payment.amount == Decimal("100.00")
    assert payment.currency == "USD"
    assert payment.transaction_id.startswith("TRANS-")
    assert reservation.is_paid is True
    assert reservation.status == ReservationStatus.CONFIRMED

    payment_notes = [
        n for n in env.notification_repo.list_for_user(ALICE.id) if n.type == NotificationType.PAYMENT
    ]
    assert [n.title for n in payment_notes] == ["Payment Successful"]
    assert "100.00 USD" in payment_notes[0].message


def test_card_details_are_not_stored(env, reservation):
    payment = env.payments.process_payment(ALICE, _pay(reservation.id))
    dumped = payment.model_dump()
    assert "card_number" not in dumped
    assert "cvv" not in dumped


def test_second_payment_rejected(env, reservation):
    env.payments.process_payment(ALICE, _pay(reservation.id))
    with pytest.raises(DuplicateError):
        env.payments.process_payment(ALICE, _pay(reservation.id))


def test_concurrent_payments_only_one_recorded(env, reservation):
    workers = 6
    barrier = threading.Barrier(workers)
    outcomes: list[str] = []
    lock = threading.Lock()

    def pay() -> None:
        barrier.wait()
        try:
            env.payments.process_payment(ALICE, _pay(reservation.id))
            result = "paid"
        except DuplicateError:
            result = "duplicate"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=pay) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["duplicate"] * (workers - 1) + ["paid"]
    assert len(env.payment_repo.list_all()) == 1


def test_payment_for_unknown_reservation(env):
    with pytest.raises(ValidationFailed):
        env.payments.process_payment(ALICE, _pay("missing"))


def test_payment_for_someone_elses_reservation(env, reservation):
    with pytest.raises(PermissionDeniedError):
        env.payments.process_payment(BOB, _pay(reservation.id))


def test_cancelled_reservation_cannot_be_paid(env, reservation):
    env.booking.change_status(ALICE, reservation.id, "Cancelled")
    with pytest.raises(ValidationFailed):
        env.payments.process_payment(ALICE, _pay(reservation.id))
    assert env.payment_repo.list_all() == []


def test_refund_marks_reservation_unpaid(env, reservation):
    payment = env.payments.process_payment(ALICE, _pay(reservation.id))

    env.payments.update_status(payment.id, "Refunded")

    assert payment.status == PaymentStatus.REFUNDED
    assert payment.updated_at is not None
    assert reservation.is_paid is False
    titles = [n.title for n in env.notification_repo.list_for_user(ALICE.id)]
    assert "Payment Refunded" in titles


def test_completed_status_marks_paid_and_keeps_transaction_override(env, reservation):
    payment = env.payments.process_payment(ALICE, _pay(reservation.id))
    env.payments.update_status(payment.id, "Failed")
    assert reservation.is_paid is False

    env.payments.update_status(payment.id, "Completed", transaction_id="GW-42")

    assert payment.transaction_id == "GW-42"
    assert reservation.is_paid is True
    assert reservation.status == ReservationStatus.CONFIRMED
    titles = [n.title for n in env.notification_repo.list_for_user(ALICE.id)]
    assert "Payment Failed" in titles
    assert "Payment Completed" in titles


def test_update_status_rejects_unknown_value(env, reservation):
    payment = env.payments.process_payment(ALICE, _pay(reservation.id))
    with pytest.raises(InvalidStatusError):
        env.payments.update_status(payment.id, "Disputed")
    assert payment.status == PaymentStatus.COMPLETED


def test_update_status_unknown_payment(env):
    with pytest.raises(NotFoundError):
        env.payments.update_status("missing", "Completed")


def test_list_and_get_respect_ownership(env, room, reservation):
    payment = env.payments.process_payment(ALICE, _pay(reservation.id))

    assert env.payments.list_for_actor(ALICE) == [payment]
    assert env.payments.list_for_actor(BOB) == []
    assert env.payments.list_for_actor(ADMIN) == [payment]
    assert env.payments.get_for_actor(ADMIN, payment.id) is payment
    with pytest.raises(PermissionDeniedError):
        env.payments.get_for_actor(BOB, payment.id)
