"""
Pydantic schemas for custom roles.
"""
from datetime import datetime
from pydantic import Field

from codeclub.core.schemas import APIModel
from codeclub.features.permissions.models import Permission
from codeclub.features.roles.models import DEFAULT_ROLE_COLOR


COLOR_PATTERN = "^#[0-9A-Fa-f]{6}$"


class RoleSummary(APIModel):
    """Role fields embedded in user payloads."""
    id: str
    name: str
    color: str
    permissions: list[Permission]


class CreatorSummary(APIModel):
    id: str
    username: str
    avatar_url: str | None = None


class RoleResponse(RoleSummary):
    description: str | None = None
    created_by_id: str | None = None
    creator: CreatorSummary | None = None
    created_at: datetime
    updated_at: datetime


class RoleCreate(APIModel):
    """Schema for creating a custom role. ``permissions`` must not be empty."""
    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = Field(None, max_length=1000)
    color: str = Field(DEFAULT_ROLE_COLOR, pattern=COLOR_PATTERN)
    permissions: list[Permission]


class RoleUpdate(APIModel):
    """Partial update; only the fields sent are changed."""
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=1000)
    color: str | None = Field(None, pattern=COLOR_PATTERN)
    permissions: list[Permission] | None = None
