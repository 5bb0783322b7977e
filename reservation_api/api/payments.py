"""Payment endpoints.

GET   /api/payments               → caller's payments (all for admin)
GET   /api/payments/{id}          → one payment (owner or admin)
POST  /api/payments               → pay for a reservation
PATCH /api/payments/{id}/status   → set payment status (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from reservation_api.api.presenters import payment_view
from reservation_api.auth.context import CurrentUser
from reservation_api.auth.dependencies import get_current_user, require_admin
from reservation_api.domain.schemas import (
    CreatePaymentRequest,
    PaymentView,
    UpdatePaymentStatusRequest,
)
from reservation_api.wiring import payments

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("", response_model=list[PaymentView])
def list_payments(user: CurrentUser = Depends(get_current_user)) -> list[PaymentView]:
    return [payment_view(p) for p in payments.list_for_actor(user)]


@router.get("/{payment_id}", response_model=PaymentView)
def get_payment(payment_id: str, user: CurrentUser = Depends(get_current_user)) -> PaymentView:
    return payment_view(payments.get_for_actor(user, payment_id))


@router.post("", response_model=PaymentView, status_code=201)
def create_payment(
    payload: CreatePaymentRequest, user: CurrentUser = Depends(get_current_user)
) -> PaymentView:
    return payment_view(payments.process_payment(user, payload))


@router.patch("/{payment_id}/status", status_code=204)
def update_payment_status(
    payment_id: str,
    payload: UpdatePaymentStatusRequest,
    _admin: CurrentUser = Depends(require_admin),
) -> Response:
    payments.update_status(payment_id, payload.status, payload.transaction_id)
    return Response(status_code=204)
