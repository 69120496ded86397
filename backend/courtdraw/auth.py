"""
Caller identity supplied by the upstream auth gateway.

The gateway verifies the session and forwards the user id and roles as
headers. Routes turn them into a CallerIdentity and pass it explicitly to
services; nothing here verifies credentials.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from fastapi import Header

from courtdraw.errors import ForbiddenError

ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class CallerIdentity:
    user_id: Optional[str] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles


def require_admin(caller: CallerIdentity) -> None:
    """Raise ForbiddenError unless the caller holds the admin role."""
    if not caller.is_admin:
        raise ForbiddenError("Admin access required")


def parse_roles(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    return frozenset(role.strip().lower() for role in raw.split(",") if role.strip())


def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_roles: Optional[str] = Header(default=None),
) -> CallerIdentity:
    """FastAPI dependency: build the caller identity from gateway headers."""
    return CallerIdentity(user_id=x_user_id, roles=parse_roles(x_user_roles))
