# Overview: Service-layer operations for permission checks.

"""
Permission Checking

WHY: Route access is decided on the server from the caller's role, never
from what the client chooses to show.

DESIGN PRINCIPLES:
- Fail closed: unknown roles have no permissions
- Log denials only: grants are not logged
"""

from flask import current_app

from ..models import User
from ..permissions import get_role_permissions


class PermissionDeniedError(Exception):
    """Raised when user lacks required permission."""
    pass


def get_user_permissions(user: User) -> set[str]:
    """Permission codes granted to the user's role."""
    if user is None or not user.is_active:
        return set()
    return get_role_permissions(user.role)


def user_has_permission(user: User, permission_code: str) -> bool:
    return permission_code in get_user_permissions(user)


def require_permission(user: User, permission_code: str, resource: str | None = None) -> None:
    """
    Raise PermissionDeniedError unless the user holds permission_code.

    Denials are logged as warnings with the requested resource.
    """
    if user_has_permission(user, permission_code):
        return

    current_app.logger.warning(
        "Permission denied: user=%s role=%s permission=%s resource=%s",
        user.id if user else None,
        user.role if user else None,
        permission_code,
        resource,
    )
    raise PermissionDeniedError(f"Missing permission: {permission_code}")
