"""
Pydantic schemas for projects.
"""
from datetime import datetime
from pydantic import Field

from codeclub.core.schemas import APIModel
from codeclub.features.projects.models import ProjectCategory
from codeclub.features.tags.schemas import TagResponse
from codeclub.features.users.schemas import UserSummary


class ProjectBase(APIModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    github_url: str | None = Field(None, max_length=500)
    live_url: str | None = Field(None, max_length=500)
    image_url: str | None = Field(None, max_length=500)
    category: ProjectCategory | None = None


class ProjectCreate(ProjectBase):
    """Tag names may carry a leading '#'; unknown tags are created."""
    tags: list[str] = []


class ProjectUpdate(APIModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    github_url: str | None = Field(None, max_length=500)
    live_url: str | None = Field(None, max_length=500)
    image_url: str | None = Field(None, max_length=500)
    category: ProjectCategory | None = None
    tags: list[str] | None = None


class ProjectSummary(ProjectBase):
    id: str
    member_id: str
    is_approved: bool
    tags: list[TagResponse] = []
    created_at: datetime
    updated_at: datetime


class ProjectOwner(APIModel):
    id: str
    full_name: str | None = None
    user: UserSummary


class ProjectResponse(ProjectSummary):
    member: ProjectOwner | None = None


class ProjectApproval(APIModel):
    is_approved: bool
