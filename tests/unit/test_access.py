import pytest
from src.core.access import AccessDecision, Requirement, decide, enforce
from src.core.auth import Role
from src.core.errors import ForbiddenError, UnauthorizedError
from src.domain import CallerContext

RECRUITER = CallerContext(id="rec-1", role=Role.RECRUITER)
ADMIN = CallerContext(id="adm-1", role=Role.ADMIN)
SUPERADMIN = CallerContext(id="sup-1", role=Role.SUPERADMIN)


@pytest.mark.parametrize("requirement", list(Requirement))
def test_missing_caller_is_unauthenticated(requirement: Requirement) -> None:
    assert decide(None, requirement) is AccessDecision.UNAUTHENTICATED


@pytest.mark.parametrize(
    ("caller", "requirement", "expected"),
    [
        (RECRUITER, Requirement.AUTHENTICATED, AccessDecision.ALLOWED),
        (RECRUITER, Requirement.ADMIN, AccessDecision.FORBIDDEN),
        (RECRUITER, Requirement.STAFF, AccessDecision.FORBIDDEN),
        (RECRUITER, Requirement.SUPERADMIN, AccessDecision.FORBIDDEN),
        (ADMIN, Requirement.ADMIN, AccessDecision.ALLOWED),
        (ADMIN, Requirement.STAFF, AccessDecision.ALLOWED),
        (ADMIN, Requirement.SUPERADMIN, AccessDecision.FORBIDDEN),
        (SUPERADMIN, Requirement.ADMIN, AccessDecision.FORBIDDEN),
        (SUPERADMIN, Requirement.STAFF, AccessDecision.ALLOWED),
        (SUPERADMIN, Requirement.SUPERADMIN, AccessDecision.ALLOWED),
    ],
)
def test_role_requirements(
    caller: CallerContext, requirement: Requirement, expected: AccessDecision
) -> None:
    assert decide(caller, requirement) is expected


def test_recruiter_may_read_own_records() -> None:
    assert decide(RECRUITER, Requirement.SELF_OR_STAFF, owner_id="rec-1") is AccessDecision.ALLOWED


def test_recruiter_may_not_read_other_records() -> None:
    decision = decide(RECRUITER, Requirement.SELF_OR_STAFF, owner_id="rec-2")

    assert decision is AccessDecision.FORBIDDEN


@pytest.mark.parametrize("caller", [ADMIN, SUPERADMIN])
def test_staff_may_read_any_records(caller: CallerContext) -> None:
    assert decide(caller, Requirement.SELF_OR_STAFF, owner_id="rec-2") is AccessDecision.ALLOWED


def test_enforce_raises_matching_errors() -> None:
    with pytest.raises(UnauthorizedError):
        enforce(None, Requirement.AUTHENTICATED)

    with pytest.raises(ForbiddenError):
        enforce(RECRUITER, Requirement.STAFF)

    assert enforce(ADMIN, Requirement.STAFF) is ADMIN
