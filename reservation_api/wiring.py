"""Application singletons: repositories, event bus, handlers and services.

Created at import time for simplicity; routers import what they need from here.
"""

from __future__ import annotations

import logging

from reservation_api import config
from reservation_api.domain.bus import EventBus
from reservation_api.domain.handlers import HandlerRegistry
from reservation_api.repos.memory import (
    NotificationRepository,
    PaymentRepository,
    ReservationRepository,
    ResourceRepository,
    ReviewRepository,
    UserRepository,
)
from reservation_api.services.accounts import AccountService
from reservation_api.services.booking import BookingService
from reservation_api.services.catalog import CatalogService
from reservation_api.services.notifications import NotificationService
from reservation_api.services.payments import PaymentService
from reservation_api.services.reviews import ReviewService

logger = logging.getLogger(__name__)

# ── Repositories ──────────────────────────────────────────────────────
user_repo = UserRepository()
resource_repo = ResourceRepository()
reservation_repo = ReservationRepository()
payment_repo = PaymentRepository()
review_repo = ReviewRepository()
notification_repo = NotificationRepository()

# ── Event bus ─────────────────────────────────────────────────────────
event_bus = EventBus()
handler_registry = HandlerRegistry(
    bus=event_bus,
    resource_repo=resource_repo,
    reservation_repo=reservation_repo,
    payment_repo=payment_repo,
    notification_repo=notification_repo,
)

# ── Services ──────────────────────────────────────────────────────────
accounts = AccountService(user_repo)
catalog = CatalogService(
    resource_repo, reservation_repo, review_repo, payment_repo, notification_repo
)
booking = BookingService(
    bus=event_bus,
    resource_repo=resource_repo,
    reservation_repo=reservation_repo,
    payment_repo=payment_repo,
    review_repo=review_repo,
    notification_repo=notification_repo,
)
payments = PaymentService(event_bus, reservation_repo, payment_repo)
reviews = ReviewService(reservation_repo, review_repo)
notifications = NotificationService(notification_repo)


def seed_admin() -> None:
    """Create the bootstrap admin account when one is configured."""
    if not (config.ADMIN_EMAIL and config.ADMIN_PASSWORD):
        return
    admin = accounts.ensure_admin(config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
    logger.info("admin account ready", extra={"extra_fields": {"user_id": admin.id}})
