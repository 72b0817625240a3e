"""
Project showcase routes.

Anyone can browse approved projects. Active members submit projects, which
stay hidden until someone with MANAGE_PROJECTS approves them.
"""
from typing import Annotated
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.errors import ForbiddenError, NotFoundError
from codeclub.core.schemas import MessageResponse
from codeclub.features.members.models import Member
from codeclub.features.members.routes import get_own_member
from codeclub.features.notifications import notify_new_project_submission
from codeclub.features.permissions.dependencies import has_permission
from codeclub.features.permissions.models import Permission, Principal
from codeclub.features.projects.models import Project, ProjectCategory, project_tags
from codeclub.features.projects.schemas import ProjectCreate, ProjectResponse, ProjectUpdate
from codeclub.features.tags.models import Tag, clean_tag_name
from codeclub.features.users.dependencies import get_current_principal, get_optional_principal
from codeclub.features.users.models import User
from codeclub.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


async def resolve_tags(db: AsyncSession, names: list[str]) -> list[Tag]:
    """Find tags by name, creating the missing ones."""
    cleaned = list(dict.fromkeys(name for name in map(clean_tag_name, names) if name))
    if not cleaned:
        return []

    result = await db.execute(select(Tag).where(Tag.name.in_(cleaned)))
    existing = {tag.name: tag for tag in result.scalars().all()}

    tags = []
    for name in cleaned:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
        tags.append(tag)
    return tags


async def _get_project(db: AsyncSession, project_id: str) -> Project:
    project = await db.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


async def _ensure_can_modify(db: AsyncSession, project: Project, principal: Principal, action: str) -> None:
    if has_permission(principal, Permission.MANAGE_PROJECTS) and principal.is_active:
        return
    result = await db.execute(select(Member.id).where(Member.user_id == principal.id))
    if result.scalar_one_or_none() != project.member_id or not principal.is_active:
        raise ForbiddenError(f"Not authorized to {action} this project")


@router.get("/", response_model=list[ProjectResponse])
async def list_projects(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: ProjectCategory | None = None,
    tag_ids: Annotated[str | None, Query(alias="tagIds")] = None,
    member_id: Annotated[str | None, Query(alias="memberId")] = None,
    skip: int = 0,
    limit: int = Query(100, le=500),
):
    """Approved projects of active members, newest first."""
    stmt = (
        select(Project)
        .join(Member, Project.member_id == Member.id)
        .join(User, Member.user_id == User.id)
        .where(Project.is_approved.is_(True), User.is_active.is_(True))
    )
    if category:
        stmt = stmt.where(Project.category == category)
    if member_id:
        stmt = stmt.where(Project.member_id == member_id)
    if tag_ids:
        wanted = [tag_id for tag_id in tag_ids.split(",") if tag_id]
        stmt = stmt.where(
            Project.id.in_(select(project_tags.c.project_id).where(project_tags.c.tag_id.in_(wanted)))
        )

    stmt = stmt.order_by(Project.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return result.scalars().all()


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
):
    """Unapproved projects are only visible to their owner and project managers."""
    project = await _get_project(db, project_id)
    if not project.is_approved:
        if principal is None:
            raise NotFoundError("Project not found")
        try:
            await _ensure_can_modify(db, project, principal, "view")
        except ForbiddenError:
            raise NotFoundError("Project not found") from None
    return project


@router.post("/", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    background_tasks: BackgroundTasks,
    member: Annotated[Member, Depends(get_own_member)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Submit a project for review."""
    data = project_data.model_dump(exclude={"tags"})
    project = Project(**data, member_id=member.id, is_approved=False)
    project.tags = await resolve_tags(db, project_data.tags)
    db.add(project)

    await db.commit()
    await db.refresh(project)

    log.info(f"Project {project.id} submitted by member {member.id}")
    background_tasks.add_task(notify_new_project_submission, project.title, member.user.username)
    return project


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Edit a project. Any edit sends it back for review."""
    project = await _get_project(db, project_id)
    await _ensure_can_modify(db, project, principal, "update")

    update_data = project_update.model_dump(exclude_unset=True)
    tag_names = update_data.pop("tags", None)
    for key, value in update_data.items():
        if value is None and key == "title":
            continue
        setattr(project, key, value)
    if tag_names is not None:
        project.tags = await resolve_tags(db, tag_names)
    project.is_approved = False

    await db.commit()
    await db.refresh(project)
    return project


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    project = await _get_project(db, project_id)
    await _ensure_can_modify(db, project, principal, "delete")

    await db.delete(project)
    await db.commit()
    return {"message": "Project deleted successfully"}
