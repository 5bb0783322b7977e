"""Notification endpoints.

GET    /api/notifications                 → caller's notifications, newest first
GET    /api/notifications/unread          → caller's unread notifications
PUT    /api/notifications/mark-all-read   → mark all of the caller's as read
GET    /api/notifications/{id}            → one notification (recipient or admin)
PUT    /api/notifications/{id}/read       → mark one as read
DELETE /api/notifications/{id}            → delete (recipient or admin)
POST   /api/notifications                 → send a notification (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from reservation_api.api.presenters import notification_view
from reservation_api.auth.context import CurrentUser
from reservation_api.auth.dependencies import get_current_user, require_admin
from reservation_api.domain.schemas import CreateNotificationRequest, NotificationView
from reservation_api.wiring import notifications

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationView])
def list_notifications(user: CurrentUser = Depends(get_current_user)) -> list[NotificationView]:
    return [notification_view(n) for n in notifications.list_for_actor(user)]


@router.get("/unread", response_model=list[NotificationView])
def list_unread_notifications(
    user: CurrentUser = Depends(get_current_user),
) -> list[NotificationView]:
    return [notification_view(n) for n in notifications.list_for_actor(user, unread_only=True)]


@router.put("/mark-all-read", status_code=204)
def mark_all_read(user: CurrentUser = Depends(get_current_user)) -> Response:
    notifications.mark_all_read(user)
    return Response(status_code=204)


@router.get("/{notification_id}", response_model=NotificationView)
def get_notification(
    notification_id: str, user: CurrentUser = Depends(get_current_user)
) -> NotificationView:
    return notification_view(notifications.get_for_actor(user, notification_id))


@router.put("/{notification_id}/read", status_code=204)
def mark_read(notification_id: str, user: CurrentUser = Depends(get_current_user)) -> Response:
    notifications.mark_read(user, notification_id)
    return Response(status_code=204)


@router.delete("/{notification_id}", status_code=204)
def delete_notification(
    notification_id: str, user: CurrentUser = Depends(get_current_user)
) -> Response:
    notifications.delete(user, notification_id)
    return Response(status_code=204)


@router.post("", response_model=NotificationView, status_code=201)
def create_notification(
    payload: CreateNotificationRequest, _admin: CurrentUser = Depends(require_admin)
) -> NotificationView:
    return notification_view(notifications.create(payload))
