"""The authenticated caller, passed explicitly into services."""

from __future__ import annotations

from dataclasses import dataclass, field

from reservation_api.domain.errors import PermissionDeniedError
from reservation_api.domain.models import Role, User


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated user context."""

    id: str
    email: str
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @classmethod
    def from_user(cls, user: User) -> CurrentUser:
        return cls(id=user.id, email=user.email, roles=frozenset(str(r) for r in user.roles))


def ensure_owner_or_admin(actor: CurrentUser, owner_id: str | None) -> None:
    """Raise PermissionDeniedError unless *actor* owns the record or is an admin."""
    if actor.is_admin or owner_id == actor.id:
        return
    raise PermissionDeniedError("You do not have access to this record.")
