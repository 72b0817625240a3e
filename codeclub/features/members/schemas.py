"""
Pydantic schemas for member profiles.
"""
from datetime import datetime
from pydantic import Field

from codeclub.core.schemas import APIModel
from codeclub.features.projects.schemas import ProjectSummary
from codeclub.features.skills.schemas import SkillResponse
from codeclub.features.users.schemas import UserSummary


class MemberUpdate(APIModel):
    """Fields a member may edit on their own profile."""
    full_name: str | None = Field(None, max_length=255)
    bio: str | None = Field(None, max_length=2000)
    role_title: str | None = Field(None, max_length=255)
    dev_stack: str | None = Field(None, max_length=255)
    linkedin_url: str | None = Field(None, max_length=500)
    portfolio_url: str | None = Field(None, max_length=500)


class MemberResponse(APIModel):
    id: str
    user_id: str
    full_name: str | None = None
    bio: str | None = None
    role_title: str | None = None
    dev_stack: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    user: UserSummary
    skills: list[SkillResponse] = []
    created_at: datetime
    updated_at: datetime


class MemberProfile(MemberResponse):
    """Full profile including projects."""
    projects: list[ProjectSummary] = []


class AddSkillsRequest(APIModel):
    skill_ids: list[str] = Field(..., min_length=1)
