"""Reservation endpoints.

GET    /api/reservations                 → caller's reservations (all for admin)
GET    /api/reservations/upcoming        → same, starting in the future
GET    /api/reservations/availability    → resource availability for a window
GET    /api/reservations/user/{user_id}  → a user's reservations (admin)
GET    /api/reservations/{id}            → one reservation (owner or admin)
POST   /api/reservations                 → book (optionally recurring)
PUT    /api/reservations/{id}            → change window/resource/attendees/status
PATCH  /api/reservations/{id}/status     → change status only
DELETE /api/reservations/{id}            → delete with dependents
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response

from reservation_api.api.presenters import reservation_view
from reservation_api.auth.context import CurrentUser
from reservation_api.auth.dependencies import get_current_user, require_admin
from reservation_api.domain.models import as_utc
from reservation_api.domain.schemas import (
    CreateReservationRequest,
    ReservationView,
    ResourceView,
    UpdateReservationRequest,
    UpdateStatusRequest,
)
from reservation_api.wiring import booking, catalog

router = APIRouter(prefix="/api/reservations", tags=["reservations"])


@router.get("", response_model=list[ReservationView])
def list_reservations(user: CurrentUser = Depends(get_current_user)) -> list[ReservationView]:
    return [reservation_view(r) for r in booking.list_for_actor(user)]


@router.get("/upcoming", response_model=list[ReservationView])
def list_upcoming_reservations(
    user: CurrentUser = Depends(get_current_user),
) -> list[ReservationView]:
    now = datetime.now(timezone.utc)
    return [reservation_view(r) for r in booking.list_for_actor(user, upcoming_after=now)]


@router.get("/availability", response_model=list[ResourceView])
def check_availability(
    start_date: datetime, end_date: datetime, resource_id: str | None = None
) -> list[ResourceView]:
    return catalog.availability(as_utc(start_date), as_utc(end_date), resource_id)


@router.get("/user/{user_id}", response_model=list[ReservationView])
def list_user_reservations(
    user_id: str, _admin: CurrentUser = Depends(require_admin)
) -> list[ReservationView]:
    return [reservation_view(r) for r in booking.list_for_user(user_id)]


@router.get("/{reservation_id}", response_model=ReservationView)
def get_reservation(
    reservation_id: str, user: CurrentUser = Depends(get_current_user)
) -> ReservationView:
    return reservation_view(booking.get_for_actor(user, reservation_id))


@router.post("", response_model=ReservationView, status_code=201)
def create_reservation(
    payload: CreateReservationRequest, user: CurrentUser = Depends(get_current_user)
) -> ReservationView:
    reservation, _occurrences = booking.create_reservation(user, payload)
    return reservation_view(reservation)


@router.put("/{reservation_id}", status_code=204)
def update_reservation(
    reservation_id: str,
    payload: UpdateReservationRequest,
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    booking.update_reservation(user, reservation_id, payload)
    return Response(status_code=204)


@router.patch("/{reservation_id}/status", status_code=204)
def update_reservation_status(
    reservation_id: str,
    payload: UpdateStatusRequest,
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    booking.change_status(user, reservation_id, payload.status)
    return Response(status_code=204)


@router.delete("/{reservation_id}", status_code=204)
def delete_reservation(
    reservation_id: str, user: CurrentUser = Depends(get_current_user)
) -> Response:
    booking.delete_reservation(user, reservation_id)
    return Response(status_code=204)
