"""
Custom role API routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.schemas import MessageResponse
from codeclub.features.permissions.dependencies import require_permission
from codeclub.features.permissions.models import Permission, Principal
from codeclub.features.roles.schemas import RoleCreate, RoleResponse, RoleUpdate
from codeclub.features.roles.service import RoleService
from codeclub.features.users.schemas import UserSummary


router = APIRouter()


def get_role_service(db: Annotated[AsyncSession, Depends(get_db)]) -> RoleService:
    return RoleService(db)


@router.get("/", response_model=list[RoleResponse])
async def list_roles(
    _viewer: Annotated[Principal, Depends(require_permission(Permission.VIEW_DASHBOARD))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    """List all custom roles, newest first."""
    return await service.list_roles()


@router.post("/", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    role_data: RoleCreate,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_ROLES))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    """Create a custom role."""
    return await service.create_role(
        name=role_data.name,
        permissions=role_data.permissions,
        color=role_data.color,
        description=role_data.description,
        created_by_id=actor.id,
    )


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    _viewer: Annotated[Principal, Depends(require_permission(Permission.VIEW_DASHBOARD))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    return await service.get_role(role_id)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: str,
    role_update: RoleUpdate,
    _actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_ROLES))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    """Update name, description, color or permissions of a role."""
    return await service.update_role(role_id, **role_update.model_dump(exclude_unset=True))


@router.delete("/{role_id}", response_model=MessageResponse)
async def delete_role(
    role_id: str,
    _actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_ROLES))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    """Delete a role; users holding it keep their built-in role."""
    unassigned = await service.delete_role(role_id)
    return {"message": f"Role deleted successfully ({unassigned} users unassigned)"}


@router.get("/{role_id}/users", response_model=list[UserSummary])
async def list_role_users(
    role_id: str,
    _viewer: Annotated[Principal, Depends(require_permission(Permission.VIEW_DASHBOARD))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    """Users currently assigned this role."""
    return await service.list_users_for_role(role_id)
