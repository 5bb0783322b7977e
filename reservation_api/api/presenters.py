"""Turn stored records into the response shapes the API returns."""

from __future__ import annotations

from reservation_api.domain.models import (
    Notification,
    PaymentDetails,
    Reservation,
    Review,
    User,
)
from reservation_api.domain.schemas import (
    NotificationView,
    PaymentView,
    ReservationView,
    ReviewView,
    UserView,
)
from reservation_api.wiring import (
    payment_repo,
    reservation_repo,
    resource_repo,
    review_repo,
    user_repo,
)


def user_view(user: User) -> UserView:
    return UserView(
        **user.model_dump(exclude={"password_hash", "roles", "registration_date", "last_login"}),
        full_name=user.full_name,
        roles=[str(role) for role in user.roles],
    )


def _user_name(user_id: str) -> str:
    user = user_repo.get(user_id)
    return user.full_name if user else ""


def payment_view(payment: PaymentDetails) -> PaymentView:
    return PaymentView(**payment.model_dump())


def review_view(review: Review) -> ReviewView:
    view = ReviewView(**review.model_dump(), user_name=_user_name(review.user_id))
    reservation = reservation_repo.get(review.reservation_id)
    if reservation is not None:
        view.resource_id = reservation.resource_id
        resource = resource_repo.get(reservation.resource_id)
        view.resource_name = resource.name if resource else ""
    return view


def reservation_view(reservation: Reservation) -> ReservationView:
    resource = resource_repo.get(reservation.resource_id)
    payment = payment_repo.get_for_reservation(reservation.id)
    reviews = review_repo.list_for_reservations([reservation.id])
    ratings = [r.rating for r in reviews]

    return ReservationView(
        **reservation.model_dump(exclude={"updated_at"}),
        resource_name=resource.name if resource else "",
        user_name=_user_name(reservation.user_id),
        payment_details=payment_view(payment) if payment else None,
        reviews=[review_view(r) for r in reviews],
        average_rating=sum(ratings) / len(ratings) if ratings else None,
        resource_capacity=resource.capacity if resource else 0,
        resource_image_url=resource.image_url if resource else None,
        resource_location=resource.location if resource else None,
    )


def notification_view(notification: Notification) -> NotificationView:
    return NotificationView(**notification.model_dump())
