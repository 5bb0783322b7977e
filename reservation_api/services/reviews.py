"""Reviews left by users on their reservations."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from reservation_api.auth.context import CurrentUser, ensure_owner_or_admin
from reservation_api.domain.errors import DuplicateError, NotFoundError, ValidationFailed
from reservation_api.domain.models import Review
from reservation_api.domain.schemas import CreateReviewRequest, UpdateReviewRequest
from reservation_api.repos.memory import ReservationRepository, ReviewRepository

logger = logging.getLogger(__name__)


def _newest_first(reviews: list[Review]) -> list[Review]:
    return sorted(reviews, key=lambda r: r.created_at, reverse=True)


class ReviewService:
    def __init__(self, reservation_repo: ReservationRepository, review_repo: ReviewRepository) -> None:
        self.reservation_repo = reservation_repo
        self.review_repo = review_repo

    def list_all(self) -> list[Review]:
        return _newest_first(self.review_repo.list_all())

    def list_for_resource(self, resource_id: str) -> list[Review]:
        reservation_ids = [r.id for r in self.reservation_repo.list_for_resource(resource_id)]
        return _newest_first(self.review_repo.list_for_reservations(reservation_ids))

    def get(self, review_id: str) -> Review:
        review = self.review_repo.get(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        return review

    def create(self, actor: CurrentUser, request: CreateReviewRequest) -> Review:
        reservation = self.reservation_repo.get(request.reservation_id)
        if reservation is None:
            raise ValidationFailed("Reservation not found")
        ensure_owner_or_admin(actor, reservation.user_id)

        if self.review_repo.find_by_user(reservation.id, actor.id) is not None:
            raise DuplicateError("You have already reviewed this reservation")

        review = Review(
            reservation_id=reservation.id,
            user_id=actor.id,
            rating=request.rating,
            comment=request.comment,
        )
        self.review_repo.add(review)
        logger.info(
            "review created",
            extra={"extra_fields": {"review_id": review.id, "reservation_id": reservation.id}},
        )
        return review

    def update(self, actor: CurrentUser, review_id: str, request: UpdateReviewRequest) -> Review:
        review = self.get(review_id)
        ensure_owner_or_admin(actor, review.user_id)
        review.rating = request.rating
        review.comment = request.comment
        review.updated_at = datetime.now(timezone.utc)
        return review

    def delete(self, actor: CurrentUser, review_id: str) -> None:
        review = self.get(review_id)
        ensure_owner_or_admin(actor, review.user_id)
        self.review_repo.delete(review.id)
