"""
Permission introspection routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends

from codeclub.features.permissions.dependencies import effective_permissions
from codeclub.features.permissions.models import PERMISSION_DESCRIPTIONS, Permission, Principal
from codeclub.features.permissions.schemas import MyPermissionsResponse, PermissionInfo
from codeclub.features.users.dependencies import get_current_principal, get_current_user
from codeclub.features.users.models import User


router = APIRouter()


@router.get("/", response_model=list[PermissionInfo])
async def list_permissions():
    """Every permission a custom role can carry."""
    return [
        PermissionInfo(name=permission, description=PERMISSION_DESCRIPTIONS[permission])
        for permission in Permission
    ]


@router.get("/me", response_model=MyPermissionsResponse)
async def get_my_permissions(
    user: Annotated[User, Depends(get_current_user)],
    principal: Annotated[Principal, Depends(get_current_principal)]
):
    granted = effective_permissions(principal)
    return MyPermissionsResponse(
        user_id=user.id,
        role=user.role,
        is_active=user.is_active,
        custom_role_id=user.custom_role_id,
        permissions=[permission for permission in Permission if permission in granted],
    )
