"""
Admin workflows over members and projects.

Every operation takes the acting ``Principal``, checks it before touching
any row, then applies its change in a single commit.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.errors import ForbiddenError, NotFoundError, ValidationError
from codeclub.features.events.models import Event
from codeclub.features.permissions.dependencies import effective_permissions, ensure_permission
from codeclub.features.permissions.models import Permission, Principal, UserRole, parse_permissions
from codeclub.features.projects.models import Project
from codeclub.features.roles.models import CustomRole
from codeclub.features.users.models import User
from codeclub.utils import get_logger


log = get_logger(__name__)


def _ensure_can_manage(actor: Principal, target: User, new_role: UserRole | None = None) -> None:
    """
    Role hierarchy and self-demotion checks for changes to ``target``.

    Raises:
        ForbiddenError: if the change is not allowed
    """
    if target.id == actor.id and target.role == UserRole.ADMIN and new_role not in (None, UserRole.ADMIN):
        raise ForbiddenError("Cannot self-demote")
    if actor.is_admin:
        return
    if target.id == actor.id:
        raise ForbiddenError("Cannot modify your own account")
    if target.role == UserRole.ADMIN:
        raise ForbiddenError("Only an admin can modify an admin")
    if new_role == UserRole.ADMIN:
        raise ForbiddenError("Only an admin can grant the ADMIN role")


class AdminService:
    """
    Member and project moderation.

    Usage:
        service = AdminService(db)
        user = await service.approve_member(actor, user_id)
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: str) -> User:
        """
        Raises:
            NotFoundError: if no user has this id
        """
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_project(self, project_id: str) -> Project:
        project = await self.db.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def _save(self, user: User) -> User:
        await self.db.commit()
        await self.db.refresh(user)
        return user

    # Member workflow

    async def list_pending_members(self, actor: Principal) -> list[User]:
        ensure_permission(actor, Permission.VIEW_DASHBOARD)
        result = await self.db.execute(
            select(User)
            .where(User.role == UserRole.PENDING)
            .order_by(User.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_users(self, actor: Principal, role: UserRole | None = None) -> list[User]:
        ensure_permission(actor, Permission.VIEW_DASHBOARD)
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        result = await self.db.execute(stmt.order_by(User.created_at.desc()))
        return list(result.scalars().all())

    async def list_leads(self, actor: Principal) -> list[User]:
        ensure_permission(actor, Permission.VIEW_DASHBOARD)
        result = await self.db.execute(
            select(User).where(User.is_lead.is_(True)).order_by(User.username)
        )
        return list(result.scalars().all())

    async def approve_member(self, actor: Principal, user_id: str, role: UserRole = UserRole.MEMBER) -> User:
        """
        Activate a member. Approving an already approved member is a no-op.

        The lead flag is left as it is.

        Raises:
            ForbiddenError: missing MANAGE_MEMBERS or hierarchy violation
            NotFoundError: unknown user
            ValidationError: ``role`` is PENDING
        """
        ensure_permission(actor, Permission.MANAGE_MEMBERS)
        if role == UserRole.PENDING:
            raise ValidationError("Cannot approve a member as PENDING")

        user = await self.get_user(user_id)
        _ensure_can_manage(actor, user, role)

        user.role = role
        user.is_active = True
        user = await self._save(user)

        log.info(f"User {user.id} approved as {role.value} by {actor.id}")
        return user

    async def reject_member(self, actor: Principal, user_id: str) -> User:
        """
        Send a user back to PENDING and deactivate it.

        The user record and its Member Profile are kept.

        Raises:
            ForbiddenError: missing MANAGE_MEMBERS, self-demotion or hierarchy violation
            NotFoundError: unknown user
        """
        ensure_permission(actor, Permission.MANAGE_MEMBERS)
        user = await self.get_user(user_id)
        _ensure_can_manage(actor, user, UserRole.PENDING)

        user.role = UserRole.PENDING
        user.is_active = False
        user = await self._save(user)

        log.info(f"User {user.id} rejected by {actor.id}")
        return user

    async def update_user_role(self, actor: Principal, user_id: str, new_role: UserRole, is_lead: bool) -> User:
        """
        Set built-in role and lead flag together.

        The active flag follows the role: PENDING deactivates, anything else
        activates. An admin cannot demote themselves.

        Raises:
            ForbiddenError: missing MANAGE_MEMBERS, self-demotion or hierarchy violation
            NotFoundError: unknown user
        """
        ensure_permission(actor, Permission.MANAGE_MEMBERS)
        user = await self.get_user(user_id)
        _ensure_can_manage(actor, user, new_role)

        user.role = new_role
        user.is_lead = is_lead
        user.is_active = new_role != UserRole.PENDING
        user = await self._save(user)

        log.info(f"User {user.id} role set to {new_role.value} (lead={is_lead}) by {actor.id}")
        return user

    async def set_lead_status(self, actor: Principal, user_id: str, is_lead: bool) -> User:
        ensure_permission(actor, Permission.MANAGE_MEMBERS)
        user = await self.get_user(user_id)
        _ensure_can_manage(actor, user)

        user.is_lead = is_lead
        return await self._save(user)

    async def assign_custom_role(self, actor: Principal, user_id: str, role_id: str | None) -> User:
        """
        Assign a custom role to a user, or remove it with ``role_id=None``.

        Raises:
            ForbiddenError: missing MANAGE_MEMBERS, hierarchy violation, or a
                role granting permissions the actor does not hold
            NotFoundError: unknown user or role
        """
        ensure_permission(actor, Permission.MANAGE_MEMBERS)
        user = await self.get_user(user_id)
        _ensure_can_manage(actor, user)

        if role_id is not None:
            role = await self.db.get(CustomRole, role_id)
            if role is None:
                raise NotFoundError("Role not found")
            extra = set(parse_permissions(role.permissions)) - effective_permissions(actor)
            if extra:
                missing = ", ".join(sorted(permission.value for permission in extra))
                raise ForbiddenError(f"Cannot assign a role granting permissions you lack: {missing}")

        user.custom_role_id = role_id
        user = await self._save(user)

        log.info(f"User {user.id} custom role set to {role_id} by {actor.id}")
        return user

    # Project workflow

    async def list_pending_projects(self, actor: Principal) -> list[Project]:
        ensure_permission(actor, Permission.MANAGE_PROJECTS)
        result = await self.db.execute(
            select(Project)
            .where(Project.is_approved.is_(False))
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def approve_project(self, actor: Principal, project_id: str, is_approved: bool) -> Project:
        """
        Raises:
            ForbiddenError: missing MANAGE_PROJECTS
            NotFoundError: unknown project
        """
        ensure_permission(actor, Permission.MANAGE_PROJECTS)
        project = await self.get_project(project_id)

        project.is_approved = is_approved
        await self.db.commit()
        await self.db.refresh(project)

        log.info(f"Project {project.id} approved={is_approved} by {actor.id}")
        return project

    async def delete_project(self, actor: Principal, project_id: str) -> None:
        """
        Permanently delete a project and its tag associations.

        Raises:
            ForbiddenError: missing MANAGE_PROJECTS
            NotFoundError: unknown project
        """
        ensure_permission(actor, Permission.MANAGE_PROJECTS)
        project = await self.get_project(project_id)

        await self.db.delete(project)
        await self.db.commit()
        log.info(f"Project {project_id} deleted by {actor.id}")

    # Events

    async def set_event_featured(self, actor: Principal, event_id: str, is_featured: bool) -> Event:
        ensure_permission(actor, Permission.MANAGE_EVENTS)
        event = await self.db.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event not found")

        event.is_featured = is_featured
        await self.db.commit()
        await self.db.refresh(event)
        return event
