"""Tests for the attendance access gate."""

from types import SimpleNamespace

import pytest

from instaq.exceptions import AuthenticationError, AuthorizationError
from instaq.models.user import UserRole
from instaq.rbac import OPERATION_ROLES, authorize, is_allowed

READ_AND_CREATE = ["create", "list", "get", "stats"]
ADMIN_ONLY = ["update_status", "delete"]


def principal(role: UserRole, is_active: bool = True):
    return SimpleNamespace(id="user-1", role=role, is_active=is_active)


class TestIsAllowed:
    @pytest.mark.parametrize("operation", READ_AND_CREATE)
    def test_any_role_may_submit_and_read(self, operation):
        assert is_allowed(UserRole.STAFF, operation)
        assert is_allowed(UserRole.ADMIN, operation)

    @pytest.mark.parametrize("operation", ADMIN_ONLY)
    def test_mutations_need_admin(self, operation):
        assert is_allowed(UserRole.ADMIN, operation)
        assert not is_allowed(UserRole.STAFF, operation)

    def test_accepts_role_strings(self):
        assert is_allowed("admin", "delete")
        assert not is_allowed("staff", "delete")

    def test_unknown_role_or_operation_denied(self):
        assert not is_allowed("guest", "list")
        assert not is_allowed(UserRole.ADMIN, "drop_everything")

    def test_every_operation_registered(self):
        assert set(OPERATION_ROLES) == set(READ_AND_CREATE + ADMIN_ONLY)


class TestAuthorize:
    def test_missing_user_is_unauthenticated(self):
        with pytest.raises(AuthenticationError):
            authorize(None, "list")

    def test_inactive_user_is_unauthenticated(self):
        with pytest.raises(AuthenticationError):
            authorize(principal(UserRole.ADMIN, is_active=False), "list")

    def test_staff_denied_delete(self):
        with pytest.raises(AuthorizationError) as exc_info:
            authorize(principal(UserRole.STAFF), "delete")
        assert exc_info.value.message == "Access denied. Admin privileges required."

    def test_returns_user_when_allowed(self):
        user = principal(UserRole.ADMIN)
        assert authorize(user, "update_status") is user
