"""Tests for accounts, password hashing and JWT handling."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from reservation_api import config
from reservation_api.auth.context import CurrentUser
from reservation_api.auth.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from reservation_api.domain.errors import (
    AuthenticationFailed,
    DuplicateError,
    NotFoundError,
    ValidationFailed,
)
from reservation_api.domain.models import Role
from reservation_api.domain.schemas import (
    ChangePasswordRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)


def _register(env, email: str = "carol@example.com", password: str = "hunter22"):
    return env.accounts.register(
        RegisterRequest(email=email, password=password, first_name="Carol", last_name="Diaz")
    )


# ---------------------------------------------------------------------------
# Passwords and tokens
# ---------------------------------------------------------------------------


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_verify_against_malformed_hash_is_false():
    assert verify_password("anything", "not-a-hash") is False


def test_token_claims(env):
    user = _register(env)
    issued = datetime.now(timezone.utc)

    token, expires_at = create_access_token(user, now=issued)
    claims = decode_access_token(token)

    assert claims["sub"] == user.id
    assert claims["name"] == user.email
    assert claims["roles"] == ["User"]
    assert claims["iss"] == config.JWT_ISSUER
    assert claims["aud"] == config.JWT_AUDIENCE
    assert expires_at - issued == timedelta(hours=config.JWT_EXPIRES_HOURS)


def test_expired_token_rejected(env):
    user = _register(env)
    token, _ = create_access_token(
        user, now=datetime.now(timezone.utc) - timedelta(hours=config.JWT_EXPIRES_HOURS + 1)
    )
    with pytest.raises(InvalidTokenError, match="expired"):
        decode_access_token(token)


def test_token_signed_with_other_key_rejected(env):
    user = _register(env)
    forged = jwt.encode(
        {"sub": user.id, "exp": 9999999999, "iss": config.JWT_ISSUER, "aud": config.JWT_AUDIENCE},
        "another-secret-of-sufficient-length!!",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        decode_access_token(forged)


def test_current_user_from_user(env):
    user = env.accounts.register(
        RegisterRequest(email="root@example.com", password="rootpass"),
        roles=[Role.ADMIN, Role.USER],
    )
    current = CurrentUser.from_user(user)
    assert current.id == user.id
    assert current.is_admin is True
    assert current.roles == frozenset({"Admin", "User"})


# ---------------------------------------------------------------------------
# AccountService
# ---------------------------------------------------------------------------


def test_register_sets_defaults(env):
    user = _register(env)
    assert user.roles == [Role.USER]
    assert user.is_active is True
    assert user.full_name == "Carol Diaz"
    assert user.last_login is not None
    assert user.password_hash != "hunter22"


def test_register_duplicate_email_case_insensitive(env):
    _register(env)
    with pytest.raises(DuplicateError):
        _register(env, email="CAROL@example.com")


def test_concurrent_registrations_create_one_user(env):
    workers = 4
    barrier = threading.Barrier(workers)
    registered: list[str] = []
    duplicates: list[DuplicateError] = []
    lock = threading.Lock()

    def register(i: int) -> None:
        barrier.wait()
        try:
            user = _register(env, email="Carol@example.com" if i % 2 else "carol@example.com")
            with lock:
                registered.append(user.id)
        except DuplicateError as exc:
            with lock:
                duplicates.append(exc)

    threads = [threading.Thread(target=register, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(registered) == 1
    assert len(duplicates) == workers - 1
    assert len(env.user_repo.list_all()) == 1


def test_register_short_password(env):
    with pytest.raises(ValidationFailed):
        _register(env, password="abc")


def test_authenticate(env):
    user = _register(env)
    assert env.accounts.authenticate("carol@example.com", "hunter22") is user

    with pytest.raises(AuthenticationFailed):
        env.accounts.authenticate("carol@example.com", "nope")
    with pytest.raises(AuthenticationFailed):
        env.accounts.authenticate("nobody@example.com", "hunter22")


def test_inactive_user_cannot_log_in(env):
    user = _register(env)
    user.is_active = False
    with pytest.raises(AuthenticationFailed):
        env.accounts.authenticate("carol@example.com", "hunter22")


def test_update_profile(env):
    user = _register(env)
    env.accounts.update_profile(
        user.id, ProfileUpdateRequest(first_name="Caroline", last_name="Diaz", city="Lisbon")
    )
    assert user.full_name == "Caroline Diaz"
    assert user.city == "Lisbon"


def test_change_password(env):
    user = _register(env)

    with pytest.raises(ValidationFailed):
        env.accounts.change_password(
            user.id, ChangePasswordRequest(current_password="wrong", new_password="newpass1")
        )

    env.accounts.change_password(
        user.id, ChangePasswordRequest(current_password="hunter22", new_password="newpass1")
    )
    assert env.accounts.authenticate("carol@example.com", "newpass1") is user


def test_get_unknown_user(env):
    with pytest.raises(NotFoundError):
        env.accounts.get("missing")


def test_ensure_admin_creates_then_promotes(env):
    admin = env.accounts.ensure_admin("boss@example.com", "bosspass")
    assert admin.is_admin is True
    assert env.accounts.ensure_admin("boss@example.com", "bosspass") is admin

    user = _register(env)
    env.accounts.ensure_admin("carol@example.com", "ignored")
    assert user.is_admin is True
    assert user.roles.count(Role.ADMIN) == 1
