"""Identity claims supplied by the upstream authentication layer.

The backend never verifies credentials. It receives an already-established
``{user_id, role, permissions, email}`` context and checks ownership and roles
against it.
"""

from dataclasses import dataclass, field
from enum import Enum

from commerce.exceptions import ForbiddenError


class Role(Enum):
    CUSTOMER = "customer"
    SELLER = "seller"
    VENDOR = "vendor"
    ADMIN = "admin"


# Roles allowed to manage catalogue listings and order fulfillment
MERCHANT_ROLES = frozenset({Role.SELLER.value, Role.VENDOR.value, Role.ADMIN.value})


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = Role.CUSTOMER.value
    permissions: frozenset[str] = field(default_factory=frozenset)
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_merchant(self) -> bool:
        return self.role in MERCHANT_ROLES

    def has_permission(self, permission: str) -> bool:
        return self.is_admin or permission in self.permissions


def ensure_owner(actor_id, owner_id, resource: str) -> None:
    """Raise ``ForbiddenError`` unless the actor is the owner of the resource."""
    if str(actor_id) != str(owner_id):
        raise ForbiddenError({resource: [f"Not authorized to access this {resource}"]})


def ensure_role(principal: Principal, allowed: frozenset[str] | set[str], action: str) -> None:
    """Raise ``ForbiddenError`` unless the principal holds one of the allowed roles."""
    if principal.role not in allowed:
        raise ForbiddenError({"role": [f"Role '{principal.role}' is not allowed to {action}"]})
