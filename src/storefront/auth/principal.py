"""The authenticated caller and the authorization rules applied to it."""

from dataclasses import dataclass
from enum import Enum

from storefront.errors import Forbidden


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """Who is making a request: the user id and role carried by a bearer token."""

    user_id: str
    role: str = Role.USER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


def can_access(principal: Principal, owner_id) -> bool:
    """Owners see their own resources. Administrators see everything."""
    return principal.is_admin or str(principal.user_id) == str(owner_id)


def ensure_can_access(principal: Principal, owner_id, message: str = "Not authorized to access this order") -> None:
    if not can_access(principal, owner_id):
        raise Forbidden(message)


def ensure_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise Forbidden("Not authorized as admin")
