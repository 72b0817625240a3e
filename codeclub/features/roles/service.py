"""
Custom role management.
"""
from typing import Any, Iterable
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.errors import ConflictError, NotFoundError, ValidationError
from codeclub.features.permissions.models import parse_permissions
from codeclub.features.roles.models import CustomRole, DEFAULT_ROLE_COLOR
from codeclub.features.users.models import User
from codeclub.utils import get_logger


log = get_logger(__name__)

_UPDATABLE_FIELDS = ("name", "description", "color", "permissions")


def _validated_permissions(values: Iterable[Any] | None) -> list[str]:
    """
    Raises:
        ValidationError: if the set is empty or contains an unknown permission
    """
    try:
        permissions = parse_permissions(values or [])
    except ValueError as e:
        raise ValidationError(f"Unknown permission: {e}")
    if not permissions:
        raise ValidationError("A role needs at least one permission")
    return [permission.value for permission in permissions]


class RoleService:
    """
    Create, update, delete and reconcile custom roles.

    Permission sets are read straight from the rows on every request, so a
    change here is visible to the next permission check.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find_by_name(self, name: str) -> CustomRole | None:
        result = await self.db.execute(select(CustomRole).where(CustomRole.name == name))
        return result.scalar_one_or_none()

    async def list_roles(self) -> list[CustomRole]:
        result = await self.db.execute(select(CustomRole).order_by(CustomRole.created_at.desc(), CustomRole.name))
        return list(result.scalars().all())

    async def get_role(self, role_id: str) -> CustomRole:
        """
        Raises:
            NotFoundError: if no role has this id
        """
        role = await self.db.get(CustomRole, role_id)
        if role is None:
            raise NotFoundError("Role not found")
        return role

    async def create_role(
        self,
        name: str,
        permissions: Iterable[Any],
        color: str = DEFAULT_ROLE_COLOR,
        description: str | None = None,
        created_by_id: str | None = None,
    ) -> CustomRole:
        """
        Raises:
            ValidationError: empty or unknown permissions
            ConflictError: a role with this name exists
        """
        stored_permissions = _validated_permissions(permissions)

        if await self._find_by_name(name):
            raise ConflictError(f"Role '{name}' already exists")

        role = CustomRole(
            name=name,
            description=description,
            color=color,
            permissions=stored_permissions,
            created_by_id=created_by_id,
        )
        self.db.add(role)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Role '{name}' already exists")

        await self.db.refresh(role)
        log.info(f"Created role {role.name!r} with {len(stored_permissions)} permissions")
        return role

    async def update_role(self, role_id: str, **patch: Any) -> CustomRole:
        """
        Apply a partial update. Keys other than name, description, color and
        permissions are ignored; ``None`` values are skipped except for
        ``description``, which can be cleared.

        Raises:
            NotFoundError: unknown role
            ConflictError: renamed to another role's name
            ValidationError: empty or unknown permissions
        """
        role = await self.get_role(role_id)

        changes = {
            key: value for key, value in patch.items()
            if key in _UPDATABLE_FIELDS and (value is not None or key == "description")
        }
        if "permissions" in changes:
            changes["permissions"] = _validated_permissions(changes["permissions"])

        new_name = changes.get("name")
        if new_name is not None and new_name != role.name:
            existing = await self._find_by_name(new_name)
            if existing is not None and existing.id != role.id:
                raise ConflictError(f"Role '{new_name}' already exists")

        for key, value in changes.items():
            setattr(role, key, value)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Role '{new_name}' already exists")

        await self.db.refresh(role)
        log.info(f"Updated role {role.id} fields={sorted(changes)}")
        return role

    async def delete_role(self, role_id: str) -> int:
        """
        Delete a role and unassign it from every user holding it.

        Built-in role and active flag of those users are untouched.

        Returns:
            Number of users that lost the role

        Raises:
            NotFoundError: unknown role
        """
        role = await self.get_role(role_id)

        result = await self.db.execute(
            update(User)
            .where(User.custom_role_id == role.id)
            .values(custom_role_id=None)
            .execution_options(synchronize_session="fetch")
        )
        unassigned = result.rowcount or 0

        await self.db.delete(role)
        await self.db.commit()

        log.info(f"Deleted role {role.name!r}; unassigned from {unassigned} users")
        return unassigned

    async def list_users_for_role(self, role_id: str) -> list[User]:
        """
        Raises:
            NotFoundError: unknown role
        """
        role = await self.get_role(role_id)
        result = await self.db.execute(
            select(User).where(User.custom_role_id == role.id).order_by(User.username)
        )
        return list(result.scalars().all())

    async def ensure_role(
        self,
        name: str,
        description: str | None,
        color: str,
        permissions: Iterable[Any],
        created_by_id: str | None = None,
    ) -> tuple[CustomRole, bool]:
        """
        Make sure the role called ``name`` has exactly these attributes.

        Inserts when missing, updates otherwise, one commit per call. A
        concurrent insert of the same name is retried as an update.

        Returns:
            (role, created)
        """
        stored_permissions = _validated_permissions(permissions)
        attributes = {"description": description, "color": color, "permissions": stored_permissions}

        role = await self._find_by_name(name)
        created = role is None
        if created:
            role = CustomRole(name=name, created_by_id=created_by_id, **attributes)
            self.db.add(role)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                role = await self._find_by_name(name)
                if role is None:
                    raise
                created = False

        if not created:
            for key, value in attributes.items():
                setattr(role, key, value)
            if created_by_id is not None and role.created_by_id is None:
                role.created_by_id = created_by_id
            await self.db.commit()

        await self.db.refresh(role)
        return role, created
