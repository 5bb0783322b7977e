"""Shared fixtures: fresh in-memory services, and an HTTP client over the app singletons."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from reservation_api.auth.context import CurrentUser
from reservation_api.domain.bus import EventBus
from reservation_api.domain.handlers import HandlerRegistry
from reservation_api.domain.models import Resource, Role
from reservation_api.domain.schemas import RegisterRequest
from reservation_api.main import (
    app,
    notification_repo as app_notification_repo,
    payment_repo as app_payment_repo,
    reservation_repo as app_reservation_repo,
    resource_repo as app_resource_repo,
    review_repo as app_review_repo,
    user_repo as app_user_repo,
)
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
from reservation_api.wiring import accounts as app_accounts

ALICE = CurrentUser(id="user-alice", email="alice@example.com", roles=frozenset({"User"}))
BOB = CurrentUser(id="user-bob", email="bob@example.com", roles=frozenset({"User"}))
ADMIN = CurrentUser(id="user-admin", email="admin@example.com", roles=frozenset({"Admin", "User"}))


@pytest.fixture()
def env():
    """Fresh bus + repos + registry + services for each test."""
    bus = EventBus()
    user_repo = UserRepository()
    resource_repo = ResourceRepository()
    reservation_repo = ReservationRepository()
    payment_repo = PaymentRepository()
    review_repo = ReviewRepository()
    notification_repo = NotificationRepository()

    registry = HandlerRegistry(
        bus=bus,
        resource_repo=resource_repo,
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        notification_repo=notification_repo,
    )

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.registry = registry
    e.user_repo = user_repo
    e.resource_repo = resource_repo
    e.reservation_repo = reservation_repo
    e.payment_repo = payment_repo
    e.review_repo = review_repo
    e.notification_repo = notification_repo
    e.accounts = AccountService(user_repo)
    e.catalog = CatalogService(
        resource_repo, reservation_repo, review_repo, payment_repo, notification_repo
    )
    e.booking = BookingService(
        bus=bus,
        resource_repo=resource_repo,
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        review_repo=review_repo,
        notification_repo=notification_repo,
    )
    e.payments = PaymentService(bus, reservation_repo, payment_repo)
    e.reviews = ReviewService(reservation_repo, review_repo)
    e.notifications = NotificationService(notification_repo)
    return e


@pytest.fixture()
def room(env) -> Resource:
    """A bookable meeting room with an hourly and a daily rate."""
    resource = Resource(
        name="Board Room",
        capacity=4,
        hourly_rate=Decimal("50.00"),
        daily_rate=Decimal("300.00"),
        category="Meeting Room",
        location="Floor 2",
    )
    env.resource_repo.add(resource)
    return resource


# ---------------------------------------------------------------------------
# HTTP client over the application singletons
# ---------------------------------------------------------------------------


def _clear_app_state() -> None:
    for repo in (
        app_user_repo,
        app_resource_repo,
        app_reservation_repo,
        app_payment_repo,
        app_review_repo,
        app_notification_repo,
    ):
        repo._store.clear()


@pytest.fixture()
def api_client():
    _clear_app_state()
    client = TestClient(app)
    yield client
    _clear_app_state()


@pytest.fixture()
def register(api_client: TestClient):
    """Register a user over HTTP; returns ``(auth_headers, user_json)``."""

    def _register(email: str = "alice@example.com", password: str = "secret123", **extra):
        resp = api_client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "first_name": "Test", **extra},
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register


@pytest.fixture()
def admin_headers(api_client: TestClient) -> dict[str, str]:
    app_accounts.register(
        RegisterRequest(email="admin@example.com", password="admin-pass", first_name="Admin"),
        roles=[Role.ADMIN, Role.USER],
    )
    resp = api_client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": "admin-pass"}
    )
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture()
def api_room(api_client: TestClient, admin_headers: dict[str, str]) -> dict:
    resp = api_client.post(
        "/api/resources",
        json={
            "name": "Board Room",
            "description": "Projector and whiteboard",
            "capacity": 4,
            "hourly_rate": "50.00",
            "daily_rate": "300.00",
            "category": "Meeting Room",
            "location": "Floor 2",
        },
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
