"""
Member profile routes.

Only members whose user is active (approved) are publicly visible.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.errors import NotFoundError
from codeclub.features.members.models import Member, member_skills
from codeclub.features.members.schemas import AddSkillsRequest, MemberProfile, MemberResponse, MemberUpdate
from codeclub.features.permissions.models import UserRole
from codeclub.features.skills.models import Skill
from codeclub.features.users.dependencies import get_current_active_user
from codeclub.features.users.models import User


router = APIRouter()


def _public_members():
    return (
        select(Member)
        .join(User, Member.user_id == User.id)
        .where(User.is_active.is_(True), User.role != UserRole.PENDING)
    )


def _public_profile(member: Member) -> MemberProfile:
    profile = MemberProfile.model_validate(member)
    profile.projects = [project for project in profile.projects if project.is_approved]
    return profile


async def get_own_member(
    user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> Member:
    """The caller's own profile (active accounts only)."""
    result = await db.execute(select(Member).where(Member.user_id == user.id))
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFoundError("Member profile not found")
    return member


@router.get("/", response_model=list[MemberResponse])
async def list_members(
    db: Annotated[AsyncSession, Depends(get_db)],
    skill_ids: Annotated[str | None, Query(alias="skillIds")] = None,
    skip: int = 0,
    limit: int = Query(100, le=500),
):
    """List approved members, optionally filtered by comma-separated skill ids."""
    stmt = _public_members()
    if skill_ids:
        wanted = [skill_id for skill_id in skill_ids.split(",") if skill_id]
        stmt = stmt.where(
            Member.id.in_(select(member_skills.c.member_id).where(member_skills.c.skill_id.in_(wanted)))
        )
    stmt = stmt.order_by(Member.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return result.scalars().all()


@router.get("/leads", response_model=list[MemberResponse])
async def list_leads(db: Annotated[AsyncSession, Depends(get_db)]):
    """Active members flagged as club leads."""
    result = await db.execute(_public_members().where(User.is_lead.is_(True)).order_by(Member.full_name))
    return result.scalars().all()


@router.get("/profile", response_model=MemberProfile)
async def get_own_profile(member: Annotated[Member, Depends(get_own_member)]):
    """The caller's profile, including unapproved projects."""
    return member


@router.put("/profile", response_model=MemberProfile)
async def update_own_profile(
    update_data: MemberUpdate,
    member: Annotated[Member, Depends(get_own_member)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(member, field, value)

    await db.commit()
    await db.refresh(member)
    return member


@router.post("/skills", response_model=MemberProfile)
async def add_skills(
    request: AddSkillsRequest,
    member: Annotated[Member, Depends(get_own_member)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Attach skills to the caller's profile; ids already attached are ignored."""
    result = await db.execute(select(Skill).where(Skill.id.in_(request.skill_ids)))
    skills = result.scalars().all()
    if len(skills) != len(set(request.skill_ids)):
        raise NotFoundError("One or more skills not found")

    current = {skill.id for skill in member.skills}
    member.skills = [*member.skills, *(skill for skill in skills if skill.id not in current)]

    await db.commit()
    await db.refresh(member)
    return member


@router.delete("/skills/{skill_id}", response_model=MemberProfile)
async def remove_skill(
    skill_id: str,
    member: Annotated[Member, Depends(get_own_member)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    if not any(skill.id == skill_id for skill in member.skills):
        raise NotFoundError("Skill not on profile")

    member.skills = [skill for skill in member.skills if skill.id != skill_id]
    await db.commit()
    await db.refresh(member)
    return member


@router.get("/user/{user_id}", response_model=MemberProfile)
async def get_member_by_user_id(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Public profile of an approved member, with approved projects only."""
    result = await db.execute(_public_members().where(Member.user_id == user_id))
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFoundError("Member not found")
    return _public_profile(member)
