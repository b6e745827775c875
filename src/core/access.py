"""Authorization decisions for API routes.

`decide` is a pure function over the resolved caller, the capability a route
requires and, for ownership-scoped reads, the id of the record owner. Rules are
evaluated in order: no caller means unauthenticated; a role outside the
requirement is forbidden; an ownership-scoped read of someone else's records by
a non-staff caller is forbidden; everything else is allowed.
"""

from __future__ import annotations

from enum import Enum

from src.core.auth import Role
from src.core.errors import ForbiddenError, UnauthorizedError
from src.domain.models import CallerContext


class Requirement(str, Enum):
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    STAFF = "staff"
    SUPERADMIN = "superadmin"
    SELF_OR_STAFF = "self_or_staff"


class AccessDecision(str, Enum):
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


_ROLE_REQUIREMENTS: dict[Requirement, frozenset[Role]] = {
    Requirement.ADMIN: frozenset({Role.ADMIN}),
    Requirement.STAFF: frozenset({Role.ADMIN, Role.SUPERADMIN}),
    Requirement.SUPERADMIN: frozenset({Role.SUPERADMIN}),
}


def decide(
    caller: CallerContext | None,
    requirement: Requirement,
    owner_id: str | None = None,
) -> AccessDecision:
    if caller is None:
        return AccessDecision.UNAUTHENTICATED

    allowed_roles = _ROLE_REQUIREMENTS.get(requirement)
    if allowed_roles is not None and caller.role not in allowed_roles:
        return AccessDecision.FORBIDDEN

    if requirement is Requirement.SELF_OR_STAFF:
        if owner_id is not None and owner_id != caller.id and not caller.role.is_staff:
            return AccessDecision.FORBIDDEN

    return AccessDecision.ALLOWED


def enforce(
    caller: CallerContext | None,
    requirement: Requirement,
    owner_id: str | None = None,
) -> CallerContext:
    """Return the caller when allowed, otherwise raise the matching error."""
    decision = decide(caller, requirement, owner_id)
    if decision is AccessDecision.UNAUTHENTICATED:
        raise UnauthorizedError("Unauthorized")
    if decision is AccessDecision.FORBIDDEN:
        raise ForbiddenError("Forbidden")
    if caller is None:
        raise UnauthorizedError("Unauthorized")
    return caller
