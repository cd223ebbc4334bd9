"""FastAPI dependencies shared by every router."""

from fastapi import Header, Request

from commerce.container import Services
from commerce.exceptions import ForbiddenError
from commerce.principal import Principal, Role


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_principal(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
    x_user_permissions: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
) -> Principal:
    """Identity established by the upstream authentication layer."""
    if not x_user_id:
        raise ForbiddenError({"user": ["Missing authenticated user"]})

    role = (x_user_role or Role.CUSTOMER.value).lower()
    if role not in {r.value for r in Role}:
        raise ForbiddenError({"role": [f"Unknown role '{role}'"]})

    permissions = frozenset(p.strip() for p in (x_user_permissions or "").split(",") if p.strip())
    return Principal(user_id=x_user_id, role=role, permissions=permissions, email=(x_user_email or "").strip() or None)
