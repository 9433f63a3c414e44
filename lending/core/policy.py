"""Authorization rules for acting on users' resources.

Coarse endpoint gating (who may call block, borrow, ...) is done by the HTTP
layer through :func:`ensure_role`. Ownership is decided here, and services
call these functions themselves instead of trusting that gating.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from lending.core.exceptions import AccessDeniedError
from lending.models.user import UserRole

EMPLOYEE_TIER = frozenset({UserRole.EMPLOYEE})


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, passed explicitly into every operation."""

    user_id: int
    username: str
    email: str
    role: UserRole


def is_employee_tier(role: UserRole) -> bool:
    """Employees bypass ownership checks."""
    return role in EMPLOYEE_TIER


def can_access(
    actor_role: UserRole,
    actor_username: str,
    owner_username: Optional[str],
) -> bool:
    """Return True if the actor may act on a resource owned by ``owner_username``."""
    if is_employee_tier(actor_role):
        return True
    return owner_username is not None and actor_username == owner_username


def ensure_access(
    actor_role: UserRole,
    actor_username: str,
    owner_username: Optional[str],
    message: str = "Permission denied",
) -> None:
    if not can_access(actor_role, actor_username, owner_username):
        raise AccessDeniedError(message)


def ensure_role(role: UserRole, allowed: Iterable[UserRole]) -> None:
    allowed = tuple(allowed)
    if role not in allowed:
        raise AccessDeniedError(f"Role {role.value} not permitted")
