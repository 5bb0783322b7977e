"""Account endpoints.

POST /api/auth/register          → create a User account, returns a token
POST /api/auth/login             → exchange credentials for a token
GET  /api/auth/profile           → caller's profile
PUT  /api/auth/profile           → update caller's profile
POST /api/auth/change-password   → change caller's password
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from reservation_api.api.presenters import user_view
from reservation_api.auth.context import CurrentUser
from reservation_api.auth.dependencies import get_current_user
from reservation_api.auth.security import create_access_token
from reservation_api.domain.models import User
from reservation_api.domain.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserView,
)
from reservation_api.wiring import accounts

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    token, expiration = create_access_token(user)
    return AuthResponse(token=token, expiration=expiration, user=user_view(user))


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest) -> AuthResponse:
    return _auth_response(accounts.register(payload))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest) -> AuthResponse:
    return _auth_response(accounts.authenticate(payload.email, payload.password))


@router.get("/profile", response_model=UserView)
def get_profile(user: CurrentUser = Depends(get_current_user)) -> UserView:
    return user_view(accounts.get(user.id))


@router.put("/profile", status_code=204)
def update_profile(
    payload: ProfileUpdateRequest, user: CurrentUser = Depends(get_current_user)
) -> Response:
    accounts.update_profile(user.id, payload)
    return Response(status_code=204)


@router.post("/change-password", status_code=204)
def change_password(
    payload: ChangePasswordRequest, user: CurrentUser = Depends(get_current_user)
) -> Response:
    accounts.change_password(user.id, payload)
    return Response(status_code=204)
