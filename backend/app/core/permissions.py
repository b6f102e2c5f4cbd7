"""
Principal and role-to-capability mapping.

All role checks go through has_capability(); routes never compare role strings.
"""
from dataclasses import dataclass
from enum import Enum

from backend.app.core.config import ROLE_ADMIN, ROLE_USER
from backend.app.core.exceptions import Forbidden


class Capability(str, Enum):
    MANAGE_OWN_RESUME_DATA = "manage_own_resume_data"
    VIEW_ANY_USER = "view_any_user"


ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    ROLE_USER: frozenset({Capability.MANAGE_OWN_RESUME_DATA}),
    ROLE_ADMIN: frozenset({Capability.MANAGE_OWN_RESUME_DATA, Capability.VIEW_ANY_USER}),
}


@dataclass(frozen=True)
class Principal:
    """Authenticated identity resolved from a request's credential."""

    user_id: int
    email: str
    role: str
    session_id: int


def has_capability(principal: Principal | None, capability: Capability) -> bool:
    if principal is None:
        return False
    return capability in ROLE_CAPABILITIES.get(principal.role, frozenset())


def ensure_capability(principal: Principal | None, capability: Capability, message: str | None = None) -> None:
    if not has_capability(principal, capability):
        raise Forbidden(message)
