"""
Pydantic schemas for admin workflows.
"""
from codeclub.core.schemas import APIModel
from codeclub.features.permissions.models import UserRole


class MemberApproval(APIModel):
    """``is_active`` true approves the member, false rejects it."""
    is_active: bool
    role: UserRole | None = None


class RoleUpdateRequest(APIModel):
    role: UserRole
    is_lead: bool = False


class LeadStatusUpdate(APIModel):
    is_lead: bool


class CustomRoleAssignment(APIModel):
    """``None`` removes the custom role."""
    custom_role_id: str | None = None
