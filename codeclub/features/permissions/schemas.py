"""
Pydantic schemas for permission introspection.
"""
from codeclub.core.schemas import APIModel
from codeclub.features.permissions.models import Permission, UserRole


class PermissionInfo(APIModel):
    name: Permission
    description: str


class MyPermissionsResponse(APIModel):
    """What the caller is allowed to do, for UI gating."""
    user_id: str
    role: UserRole
    is_active: bool
    custom_role_id: str | None = None
    permissions: list[Permission]
