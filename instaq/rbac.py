"""Access gate: which roles may run which attendance operations."""
from __future__ import annotations

import logging
from typing import Literal, Optional

from instaq.exceptions import AuthenticationError, AuthorizationError
from instaq.models.user import User, UserRole

logger = logging.getLogger(__name__)

AttendanceOperation = Literal["create", "list", "get", "stats", "update_status", "delete"]

# Reads are not filtered by owner: any authenticated caller sees every record.
OPERATION_ROLES: dict[str, frozenset[UserRole]] = {
    "create": frozenset(UserRole),
    "list": frozenset(UserRole),
    "get": frozenset(UserRole),
    "stats": frozenset(UserRole),
    "update_status": frozenset({UserRole.ADMIN}),
    "delete": frozenset({UserRole.ADMIN}),
}


def is_allowed(role: UserRole | str, operation: AttendanceOperation) -> bool:
    try:
        role = UserRole(role)
    except ValueError:
        return False
    allowed = OPERATION_ROLES.get(operation)
    if allowed is None:
        return False
    return role in allowed


def authorize(user: Optional[User], operation: AttendanceOperation) -> User:
    """Raise unless ``user`` may perform ``operation``.

    Runs before any record lookup, so a denial says nothing about whether the
    target record exists.
    """
    if user is None or not user.is_active:
        raise AuthenticationError()
    if not is_allowed(user.role, operation):
        logger.warning("Denied %s for user %s (role=%s)", operation, user.id, getattr(user.role, "value", user.role))
        raise AuthorizationError()
    return user
