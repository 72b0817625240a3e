"""
Permission checking and FastAPI dependencies for route protection.

The checks are pure functions over a ``Principal``. Routes declare the
permission they need with ``require_permission``; services re-check with
``ensure_permission`` so the rule holds no matter how they are called.
"""
from typing import Annotated, Iterable
from fastapi import Depends

from codeclub.core.errors import ForbiddenError
from codeclub.features.permissions.models import ALL_PERMISSIONS, Permission, Principal, UserRole
from codeclub.features.users.dependencies import get_current_principal
from codeclub.utils import get_logger


log = get_logger(__name__)


def effective_permissions(principal: Principal) -> frozenset[Permission]:
    """Built-in role's implicit permissions plus the custom role's permissions."""
    if principal.role == UserRole.ADMIN:
        return ALL_PERMISSIONS
    return principal.custom_role_permissions


def has_permission(principal: Principal, permission: Permission) -> bool:
    """
    True if the principal is ADMIN or its custom role grants ``permission``.

    MEMBER and PENDING grant nothing on their own.
    """
    return permission in effective_permissions(principal)


def has_any_permission(principal: Principal, permissions: Iterable[Permission]) -> bool:
    granted = effective_permissions(principal)
    return any(permission in granted for permission in permissions)


def ensure_permission(principal: Principal, permission: Permission) -> None:
    """
    Raise unless the principal may exercise ``permission``.

    Inactive accounts are refused even if a custom role is still attached.

    Raises:
        ForbiddenError: account inactive or permission missing
    """
    if not principal.is_active:
        log.debug(f"Inactive user {principal.id} denied {permission.value}")
        raise ForbiddenError("Account is not active. Awaiting admin approval.")
    if not has_permission(principal, permission):
        log.debug(f"User {principal.id} denied {permission.value}")
        raise ForbiddenError(f"Permission denied: {permission.value} required")


def require_permission(permission: Permission):
    """
    FastAPI dependency to require a specific permission.

    Usage:
        @router.post("/{project_id}/approve")
        async def approve_project(
            actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_PROJECTS))],
        ):
            ...

    Returns:
        Dependency function returning the caller's ``Principal``
    """
    async def permission_dependency(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        ensure_permission(principal, permission)
        return principal

    return permission_dependency
