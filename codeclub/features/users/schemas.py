"""
Pydantic schemas for users and sign-in.
"""
from datetime import datetime
from pydantic import EmailStr, Field, field_validator

from codeclub.core.schemas import APIModel
from codeclub.features.permissions.models import UserRole
from codeclub.features.roles.schemas import RoleSummary


class UserSummary(APIModel):
    """User fields safe to embed in public payloads."""
    id: str
    username: str
    avatar_url: str | None = None
    github_url: str | None = None
    role: UserRole
    is_active: bool
    is_lead: bool


class UserResponse(UserSummary):
    email: str | None = None
    custom_role_id: str | None = None
    custom_role: RoleSummary | None = None
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class GitHubIdentity(APIModel):
    """A GitHub identity already verified by the frontend's OAuth provider."""
    github_id: str = Field(..., min_length=1, max_length=64)
    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    avatar_url: str | None = Field(None, max_length=500)
    github_url: str | None = Field(None, max_length=500)
    name: str | None = Field(None, max_length=255)

    @field_validator("github_id", mode="before")
    @classmethod
    def github_id_as_text(cls, v):
        """GitHub sends numeric ids; store them as text."""
        return str(v) if isinstance(v, int) else v


class GitHubCallbackRequest(APIModel):
    code: str = Field(..., min_length=1)


class AuthResponse(APIModel):
    token: str
    user: UserResponse


class GitHubRepo(APIModel):
    """Subset of a GitHub repository, for picking a project's source link."""
    id: int
    name: str
    full_name: str
    html_url: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    fork: bool = False
    updated_at: datetime | None = None
