"""User registration, login and profile management."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from reservation_api import config
from reservation_api.auth.security import hash_password, verify_password
from reservation_api.domain.errors import (
    AuthenticationFailed,
    DuplicateError,
    NotFoundError,
    ValidationFailed,
)
from reservation_api.domain.models import Role, User
from reservation_api.domain.schemas import (
    ChangePasswordRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from reservation_api.repos.memory import UserRepository

logger = logging.getLogger(__name__)


def _check_password_policy(password: str) -> None:
    if len(password) < config.MIN_PASSWORD_LENGTH:
        raise ValidationFailed(
            f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters long."
        )


class AccountService:
    def __init__(self, user_repo: UserRepository) -> None:
        self.user_repo = user_repo

    def get(self, user_id: str) -> User:
        user = self.user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def register(self, request: RegisterRequest, roles: list[Role] | None = None) -> User:
        if self.user_repo.get_by_email(request.email) is not None:
            raise DuplicateError("User with this email already exists")
        _check_password_policy(request.password)

        now = datetime.now(timezone.utc)
        user = User(
            email=request.email.strip(),
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            address=request.address,
            city=request.city,
            country=request.country,
            postal_code=request.postal_code,
            roles=roles or [Role.USER],
            registration_date=now,
            last_login=now,
        )
        with self.user_repo.write_lock:
            # The email may have been taken while the password was hashed.
            if self.user_repo.get_by_email(user.email) is not None:
                raise DuplicateError("User with this email already exists")
            self.user_repo.add(user)
        logger.info("user registered", extra={"extra_fields": {"user_id": user.id}})
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.user_repo.get_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            logger.warning("login failed")
            raise AuthenticationFailed("Invalid email or password")
        user.last_login = datetime.now(timezone.utc)
        return user

    def update_profile(self, user_id: str, request: ProfileUpdateRequest) -> User:
        user = self.get(user_id)
        for field, value in request.model_dump().items():
            setattr(user, field, value)
        return user

    def change_password(self, user_id: str, request: ChangePasswordRequest) -> None:
        user = self.get(user_id)
        if not verify_password(request.current_password, user.password_hash):
            raise ValidationFailed("Password change failed: current password is incorrect")
        _check_password_policy(request.new_password)
        user.password_hash = hash_password(request.new_password)
        logger.info("password changed", extra={"extra_fields": {"user_id": user.id}})

    def ensure_admin(self, email: str, password: str) -> User:
        """Create the bootstrap admin account, or grant the role to an existing user."""
        user = self.user_repo.get_by_email(email)
        if user is None:
            return self.register(
                RegisterRequest(email=email, password=password, first_name="Admin"),
                roles=[Role.ADMIN, Role.USER],
            )
        if Role.ADMIN not in user.roles:
            user.roles.append(Role.ADMIN)
        return user
