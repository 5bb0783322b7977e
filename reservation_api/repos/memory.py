"""In-memory repositories for users, resources, reservations and their dependents."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime

from reservation_api.domain.models import (
    Notification,
    PaymentDetails,
    Reservation,
    ReservationStatus,
    Resource,
    Review,
    User,
)


class UserRepository:
    """Dict-backed store for User instances, keyed by id.

    Hold ``write_lock`` across an email lookup and the ``add`` it guards.
    """

    def __init__(self) -> None:
        self._store: dict[str, User] = {}
        self.write_lock = threading.Lock()

    def add(self, user: User) -> None:
        self._store[user.id] = user

    def get(self, user_id: str) -> User | None:
        return self._store.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for user in self._store.values():
            if user.email.lower() == wanted:
                return user
        return None

    def list_all(self) -> list[User]:
        return list(self._store.values())


class ResourceRepository:
    """Dict-backed store for Resource instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Resource] = {}

    def add(self, resource: Resource) -> None:
        self._store[resource.id] = resource

    def get(self, resource_id: str) -> Resource | None:
        return self._store.get(resource_id)

    def list_all(self) -> list[Resource]:
        return list(self._store.values())

    def list_active(self) -> list[Resource]:
        return [r for r in self._store.values() if r.is_active]

    def delete(self, resource_id: str) -> None:
        self._store.pop(resource_id, None)


class ReservationRepository:
    """Dict-backed store for Reservation instances, keyed by id.

    Also owns one lock per resource: callers that check for conflicts and
    then insert must hold ``lock_for(resource_id)`` across both steps.
    """

    def __init__(self) -> None:
        self._store: dict[str, Reservation] = {}
        self._locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def lock_for(self, resource_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[resource_id]

    def add(self, reservation: Reservation) -> None:
        self._store[reservation.id] = reservation

    def add_many(self, reservations: Iterable[Reservation]) -> None:
        for reservation in reservations:
            self._store[reservation.id] = reservation

    def get(self, reservation_id: str) -> Reservation | None:
        return self._store.get(reservation_id)

    def list_all(self) -> list[Reservation]:
        return list(self._store.values())

    def list_for_user(self, user_id: str) -> list[Reservation]:
        return [r for r in self._store.values() if r.user_id == user_id]

    def list_for_resource(self, resource_id: str) -> list[Reservation]:
        return [r for r in self._store.values() if r.resource_id == resource_id]

    def find_overlapping(
        self,
        resource_id: str,
        start: datetime,
        end: datetime,
        exclude_id: str | None = None,
    ) -> list[Reservation]:
        """Return non-cancelled reservations on *resource_id* overlapping [start, end)."""
        return [
            r
            for r in list(self._store.values())
            if r.resource_id == resource_id
            and r.status != ReservationStatus.CANCELLED
            and r.id != exclude_id
            and r.start_time < end
            and start < r.end_time
        ]

    def delete(self, reservation_id: str) -> None:
        self._store.pop(reservation_id, None)


class PaymentRepository:
    """Dict-backed store for PaymentDetails, keyed by id.

    At most one payment per reservation: hold ``write_lock`` across
    ``get_for_reservation`` and the ``add`` it guards.
    """

    def __init__(self) -> None:
        self._store: dict[str, PaymentDetails] = {}
        self.write_lock = threading.Lock()

    def add(self, payment: PaymentDetails) -> None:
        self._store[payment.id] = payment

    def get(self, payment_id: str) -> PaymentDetails | None:
        return self._store.get(payment_id)

    def get_for_reservation(self, reservation_id: str) -> PaymentDetails | None:
        for payment in self._store.values():
            if payment.reservation_id == reservation_id:
                return payment
        return None

    def list_all(self) -> list[PaymentDetails]:
        return list(self._store.values())

    def delete_for_reservation(self, reservation_id: str) -> None:
        to_remove = [pid for pid, p in self._store.items() if p.reservation_id == reservation_id]
        for pid in to_remove:
            del self._store[pid]


class ReviewRepository:
    """Dict-backed store for Review instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Review] = {}

    def add(self, review: Review) -> None:
        self._store[review.id] = review

    def get(self, review_id: str) -> Review | None:
        return self._store.get(review_id)

    def list_all(self) -> list[Review]:
        return list(self._store.values())

    def list_for_reservations(self, reservation_ids: Iterable[str]) -> list[Review]:
        wanted = set(reservation_ids)
        return [r for r in self._store.values() if r.reservation_id in wanted]

    def find_by_user(self, reservation_id: str, user_id: str) -> Review | None:
        for review in self._store.values():
            if review.reservation_id == reservation_id and review.user_id == user_id:
                return review
        return None

    def delete(self, review_id: str) -> None:
        self._store.pop(review_id, None)

    def delete_for_reservation(self, reservation_id: str) -> None:
        to_remove = [rid for rid, r in self._store.items() if r.reservation_id == reservation_id]
        for rid in to_remove:
            del self._store[rid]


class NotificationRepository:
    """Dict-backed store for Notification instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Notification] = {}

    def add(self, notification: Notification) -> None:
        self._store[notification.id] = notification

    def get(self, notification_id: str) -> Notification | None:
        return self._store.get(notification_id)

    def list_for_user(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        items = [
            n
            for n in self._store.values()
            if n.user_id == user_id and not (unread_only and n.is_read)
        ]
        return sorted(items, key=lambda n: n.created_at, reverse=True)

    def list_for_reservation(self, reservation_id: str) -> list[Notification]:
        return [n for n in self._store.values() if n.reservation_id == reservation_id]

    def mark_all_read(self, user_id: str) -> int:
        count = 0
        for notification in self._store.values():
            if notification.user_id == user_id and not notification.is_read:
                notification.is_read = True
                count += 1
        return count

    def delete(self, notification_id: str) -> None:
        self._store.pop(notification_id, None)

    def delete_for_reservation(self, reservation_id: str) -> None:
        to_remove = [nid for nid, n in self._store.items() if n.reservation_id == reservation_id]
        for nid in to_remove:
            del self._store[nid]
