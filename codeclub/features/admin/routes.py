"""
Admin dashboard routes.

Routes declare the permission they need; ``AdminService`` checks again before
writing.
"""
from typing import Annotated
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.schemas import MessageResponse
from codeclub.features.admin.schemas import (
    CustomRoleAssignment,
    LeadStatusUpdate,
    MemberApproval,
    RoleUpdateRequest,
)
from codeclub.features.admin.service import AdminService
from codeclub.features.events.schemas import EventFeatured, EventResponse
from codeclub.features.notifications import (
    notify_project_approved,
    notify_project_rejected,
    notify_user_approved,
    notify_user_rejected,
)
from codeclub.features.permissions.dependencies import require_permission
from codeclub.features.permissions.models import Permission, Principal, UserRole
from codeclub.features.projects.schemas import ProjectApproval, ProjectResponse
from codeclub.features.users.schemas import UserResponse


router = APIRouter()


def get_admin_service(db: Annotated[AsyncSession, Depends(get_db)]) -> AdminService:
    return AdminService(db)


Service = Annotated[AdminService, Depends(get_admin_service)]
DashboardViewer = Annotated[Principal, Depends(require_permission(Permission.VIEW_DASHBOARD))]
MemberManager = Annotated[Principal, Depends(require_permission(Permission.MANAGE_MEMBERS))]
ProjectManager = Annotated[Principal, Depends(require_permission(Permission.MANAGE_PROJECTS))]
EventManager = Annotated[Principal, Depends(require_permission(Permission.MANAGE_EVENTS))]


@router.get("/members/pending", response_model=list[UserResponse])
async def list_pending_members(actor: DashboardViewer, service: Service):
    return await service.list_pending_members(actor)


@router.get("/users", response_model=list[UserResponse])
async def list_users(actor: DashboardViewer, service: Service, role: UserRole | None = None):
    return await service.list_users(actor, role)


@router.get("/leads", response_model=list[UserResponse])
async def list_leads(actor: DashboardViewer, service: Service):
    return await service.list_leads(actor)


@router.post("/members/{user_id}/approve", response_model=UserResponse)
async def approve_member(
    user_id: str,
    approval: MemberApproval,
    background_tasks: BackgroundTasks,
    actor: MemberManager,
    service: Service
):
    """Approve (``isActive: true``) or reject (``isActive: false``) a member."""
    if not approval.is_active:
        user = await service.reject_member(actor, user_id)
        background_tasks.add_task(notify_user_rejected, user.username)
        return user

    user = await service.approve_member(actor, user_id, approval.role or UserRole.MEMBER)
    background_tasks.add_task(notify_user_approved, user.username, user.role.value)
    return user


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    request: RoleUpdateRequest,
    actor: MemberManager,
    service: Service
):
    return await service.update_user_role(actor, user_id, request.role, request.is_lead)


@router.put("/users/{user_id}/lead-status", response_model=UserResponse)
async def set_lead_status(
    user_id: str,
    request: LeadStatusUpdate,
    actor: MemberManager,
    service: Service
):
    return await service.set_lead_status(actor, user_id, request.is_lead)


@router.put("/users/{user_id}/custom-role", response_model=UserResponse)
async def assign_custom_role(
    user_id: str,
    request: CustomRoleAssignment,
    actor: MemberManager,
    service: Service
):
    return await service.assign_custom_role(actor, user_id, request.custom_role_id)


@router.get("/projects/pending", response_model=list[ProjectResponse])
async def list_pending_projects(actor: ProjectManager, service: Service):
    return await service.list_pending_projects(actor)


@router.post("/projects/{project_id}/approve", response_model=ProjectResponse)
async def approve_project(
    project_id: str,
    approval: ProjectApproval,
    background_tasks: BackgroundTasks,
    actor: ProjectManager,
    service: Service
):
    project = await service.approve_project(actor, project_id, approval.is_approved)
    if project.member is not None:
        notify = notify_project_approved if project.is_approved else notify_project_rejected
        background_tasks.add_task(notify, project.title, project.member.user.username)
    return project


@router.delete("/projects/{project_id}", response_model=MessageResponse)
async def delete_project(project_id: str, actor: ProjectManager, service: Service):
    await service.delete_project(actor, project_id)
    return {"message": "Project deleted successfully"}


@router.put("/events/{event_id}/featured", response_model=EventResponse)
async def set_event_featured(
    event_id: str,
    request: EventFeatured,
    actor: EventManager,
    service: Service
):
    return await service.set_event_featured(actor, event_id, request.is_featured)
