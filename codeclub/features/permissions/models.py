"""
Permission vocabulary, built-in roles and the authenticated principal.

Two ways grant a permission:
- the built-in ``UserRole`` stored on the user (only ADMIN grants anything,
  and it grants everything)
- an assigned ``CustomRole`` carrying an explicit permission set
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Iterable


class Permission(str, enum.Enum):
    """Closed set of capability flags."""
    VIEW_DASHBOARD = "VIEW_DASHBOARD"
    MANAGE_MEMBERS = "MANAGE_MEMBERS"
    MANAGE_PROJECTS = "MANAGE_PROJECTS"
    MANAGE_EVENTS = "MANAGE_EVENTS"
    MANAGE_SKILLS = "MANAGE_SKILLS"
    MANAGE_TAGS = "MANAGE_TAGS"
    MANAGE_ROLES = "MANAGE_ROLES"


ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

PERMISSION_DESCRIPTIONS: dict[Permission, str] = {
    Permission.VIEW_DASHBOARD: "View the admin dashboard",
    Permission.MANAGE_MEMBERS: "Approve, reject and change the role of members",
    Permission.MANAGE_PROJECTS: "Approve and delete projects",
    Permission.MANAGE_EVENTS: "Create, edit and feature events",
    Permission.MANAGE_SKILLS: "Edit the skill catalog",
    Permission.MANAGE_TAGS: "Edit the project tag catalog",
    Permission.MANAGE_ROLES: "Create, edit and delete custom roles",
}


class UserRole(str, enum.Enum):
    """Built-in role stored directly on a user."""
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    PENDING = "PENDING"


def parse_permissions(values: Iterable[Any]) -> list[Permission]:
    """
    Coerce raw values to ``Permission`` members, dropping duplicates.

    The result keeps declaration order so stored lists are stable.

    Raises:
        ValueError: if a value is not a known permission
    """
    wanted = {Permission(value) for value in values}
    return [permission for permission in Permission if permission in wanted]


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller, built once per request from the stored user.

    ``custom_role_permissions`` is empty when no custom role is assigned.
    """
    id: str
    role: UserRole
    is_active: bool
    is_lead: bool = False
    custom_role_permissions: frozenset[Permission] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: Any) -> "Principal":
        """Snapshot a ``User`` row (with ``custom_role`` loaded)."""
        custom_role = user.custom_role
        permissions = frozenset(parse_permissions(custom_role.permissions)) if custom_role else frozenset()
        return cls(
            id=user.id,
            role=UserRole(user.role),
            is_active=user.is_active,
            is_lead=user.is_lead,
            custom_role_permissions=permissions,
        )
