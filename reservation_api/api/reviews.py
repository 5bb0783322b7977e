"""Review endpoints.

GET    /api/reviews                          → all reviews, newest first
GET    /api/reviews/resource/{resource_id}   → reviews of a resource
GET    /api/reviews/{id}                     → one review
POST   /api/reviews                          → review own reservation
PUT    /api/reviews/{id}                     → edit (author or admin)
DELETE /api/reviews/{id}                     → delete (author or admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from reservation_api.api.presenters import review_view
from reservation_api.auth.context import CurrentUser
from reservation_api.auth.dependencies import get_current_user
from reservation_api.domain.schemas import (
    CreateReviewRequest,
    ReviewView,
    UpdateReviewRequest,
)
from reservation_api.wiring import reviews

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=list[ReviewView])
def list_reviews() -> list[ReviewView]:
    return [review_view(r) for r in reviews.list_all()]


@router.get("/resource/{resource_id}", response_model=list[ReviewView])
def list_resource_reviews(resource_id: str) -> list[ReviewView]:
    return [review_view(r) for r in reviews.list_for_resource(resource_id)]


@router.get("/{review_id}", response_model=ReviewView)
def get_review(review_id: str) -> ReviewView:
    return review_view(reviews.get(review_id))


@router.post("", response_model=ReviewView, status_code=201)
def create_review(
    payload: CreateReviewRequest, user: CurrentUser = Depends(get_current_user)
) -> ReviewView:
    return review_view(reviews.create(user, payload))


@router.put("/{review_id}", status_code=204)
def update_review(
    review_id: str,
    payload: UpdateReviewRequest,
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    reviews.update(user, review_id, payload)
    return Response(status_code=204)


@router.delete("/{review_id}", status_code=204)
def delete_review(review_id: str, user: CurrentUser = Depends(get_current_user)) -> Response:
    reviews.delete(user, review_id)
    return Response(status_code=204)
