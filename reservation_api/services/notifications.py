"""Per-user notification inbox."""

from __future__ import annotations

from reservation_api.auth.context import CurrentUser, ensure_owner_or_admin
from reservation_api.domain.errors import NotFoundError
from reservation_api.domain.models import Notification
from reservation_api.domain.schemas import CreateNotificationRequest
from reservation_api.repos.memory import NotificationRepository


class NotificationService:
    def __init__(self, notification_repo: NotificationRepository) -> None:
        self.notification_repo = notification_repo

    def list_for_actor(self, actor: CurrentUser, unread_only: bool = False) -> list[Notification]:
        return self.notification_repo.list_for_user(actor.id, unread_only=unread_only)

    def get_for_actor(self, actor: CurrentUser, notification_id: str) -> Notification:
        notification = self.notification_repo.get(notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        ensure_owner_or_admin(actor, notification.user_id)
        return notification

    def mark_read(self, actor: CurrentUser, notification_id: str) -> Notification:
        notification = self.get_for_actor(actor, notification_id)
        notification.is_read = True
        return notification

    def mark_all_read(self, actor: CurrentUser) -> int:
        return self.notification_repo.mark_all_read(actor.id)

    def delete(self, actor: CurrentUser, notification_id: str) -> None:
        notification = self.get_for_actor(actor, notification_id)
        self.notification_repo.delete(notification.id)

    def create(self, request: CreateNotificationRequest) -> Notification:
        """Admin-issued notification; no check that ``user_id`` exists."""
        notification = Notification(**request.model_dump())
        self.notification_repo.add(notification)
        return notification
