"""
Project tag routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.errors import ConflictError, NotFoundError, ValidationError
from codeclub.core.schemas import MessageResponse
from codeclub.features.permissions.dependencies import require_permission
from codeclub.features.permissions.models import Permission, Principal
from codeclub.features.tags.models import Tag, clean_tag_name
from codeclub.features.tags.schemas import TagCreate, TagResponse


router = APIRouter()


@router.get("/", response_model=list[TagResponse])
async def list_tags(
    db: Annotated[AsyncSession, Depends(get_db)],
    q: str | None = None,
    limit: int = Query(100, le=500)
):
    """List tags, optionally only those starting with ``q``."""
    stmt = select(Tag)
    if q:
        stmt = stmt.where(Tag.name.ilike(f"{clean_tag_name(q)}%"))
    result = await db.execute(stmt.order_by(Tag.name).limit(limit))
    return result.scalars().all()


@router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreate,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_TAGS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    name = clean_tag_name(tag_data.name)
    if not name:
        raise ValidationError("Tag name cannot be empty")

    result = await db.execute(select(Tag.id).where(Tag.name == name))
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Tag with this name already exists")

    tag = Tag(name=name)
    db.add(tag)
    await db.commit()
    await db.refresh(tag)
    return tag


@router.delete("/{tag_id}", response_model=MessageResponse)
async def delete_tag(
    tag_id: str,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_TAGS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Delete a tag; it is detached from every project."""
    tag = await db.get(Tag, tag_id)
    if tag is None:
        raise NotFoundError("Tag not found")

    await db.delete(tag)
    await db.commit()
    return {"message": "Tag deleted successfully"}
