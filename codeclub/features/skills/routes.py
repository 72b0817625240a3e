"""
Skill catalog routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.errors import ConflictError, NotFoundError
from codeclub.core.schemas import MessageResponse
from codeclub.features.permissions.dependencies import require_permission
from codeclub.features.permissions.models import Permission, Principal
from codeclub.features.skills.models import Skill
from codeclub.features.skills.schemas import SkillCreate, SkillResponse, SkillUpdate


router = APIRouter()


async def _get_skill(db: AsyncSession, skill_id: str) -> Skill:
    skill = await db.get(Skill, skill_id)
    if skill is None:
        raise NotFoundError("Skill not found")
    return skill


async def _ensure_unique_name(db: AsyncSession, name: str) -> None:
    result = await db.execute(select(Skill.id).where(Skill.name == name))
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Skill with this name already exists")


@router.get("/", response_model=list[SkillResponse])
async def list_skills(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: str | None = None
):
    """List all skills, grouped by category then name."""
    stmt = select(Skill)
    if category:
        stmt = stmt.where(Skill.category == category)
    result = await db.execute(stmt.order_by(Skill.category, Skill.name))
    return result.scalars().all()


@router.get("/{skill_id}", response_model=SkillResponse)
async def get_skill(skill_id: str, db: Annotated[AsyncSession, Depends(get_db)]):
    return await _get_skill(db, skill_id)


@router.post("/", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
async def create_skill(
    skill_data: SkillCreate,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_SKILLS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    await _ensure_unique_name(db, skill_data.name)

    skill = Skill(**skill_data.model_dump())
    db.add(skill)
    await db.commit()
    await db.refresh(skill)
    return skill


@router.put("/{skill_id}", response_model=SkillResponse)
async def update_skill(
    skill_id: str,
    skill_data: SkillUpdate,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_SKILLS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    skill = await _get_skill(db, skill_id)

    update_dict = skill_data.model_dump(exclude_unset=True)
    if update_dict.get("name") and update_dict["name"] != skill.name:
        await _ensure_unique_name(db, update_dict["name"])
    for field, value in update_dict.items():
        if field == "name" and value is None:
            continue
        setattr(skill, field, value)

    await db.commit()
    await db.refresh(skill)
    return skill


@router.delete("/{skill_id}", response_model=MessageResponse)
async def delete_skill(
    skill_id: str,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_SKILLS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Delete a skill; it is removed from every member profile."""
    skill = await _get_skill(db, skill_id)
    await db.delete(skill)
    await db.commit()
    return {"message": "Skill deleted successfully"}
