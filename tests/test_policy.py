"""Authorization policy tests."""
import pytest

from lending.core.exceptions import AccessDeniedError
from lending.core.policy import can_access, ensure_access, ensure_role, is_employee_tier
from lending.models import UserRole


def test_employee_tier():
    assert is_employee_tier(UserRole.EMPLOYEE)
    assert not is_employee_tier(UserRole.CUSTOMER)


@pytest.mark.parametrize(
    "role, actor, owner, expected",
    [
        (UserRole.EMPLOYEE, "staff", "alice", True),
        (UserRole.EMPLOYEE, "staff", None, True),
        (UserRole.CUSTOMER, "alice", "alice", True),
        (UserRole.CUSTOMER, "bob", "alice", False),
        (UserRole.CUSTOMER, "alice", None, False),
        (UserRole.CUSTOMER, "Alice", "alice", False),
    ],
)
def test_can_access(role, actor, owner, expected):
    assert can_access(role, actor, owner) is expected


def test_ensure_access_raises_with_message():
    with pytest.raises(AccessDeniedError) as exc_info:
        ensure_access(UserRole.CUSTOMER, "bob", "alice", message="No access to book with id: 3")
    assert exc_info.value.message == "No access to book with id: 3"
    assert exc_info.value.status_code == 403


def test_ensure_role():
    ensure_role(UserRole.EMPLOYEE, [UserRole.EMPLOYEE])
    with pytest.raises(AccessDeniedError):
        ensure_role(UserRole.CUSTOMER, [UserRole.EMPLOYEE])
