"""
Club event routes.

Events are public. Any active member may announce one; editing and deleting
need MANAGE_EVENTS.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.errors import NotFoundError
from codeclub.core.schemas import MessageResponse
from codeclub.features.events.models import Event
from codeclub.features.events.schemas import EventCreate, EventResponse, EventUpdate
from codeclub.features.permissions.dependencies import require_permission
from codeclub.features.permissions.models import Permission, Principal
from codeclub.features.users.dependencies import get_current_active_user
from codeclub.features.users.models import User
from codeclub.utils import get_logger


log = get_logger(__name__)
router = APIRouter()

FEATURED_LIMIT = 5


async def get_event_or_404(db: AsyncSession, event_id: str) -> Event:
    event = await db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event


@router.get("/", response_model=list[EventResponse])
async def list_events(
    db: Annotated[AsyncSession, Depends(get_db)],
    upcoming_only: Annotated[bool, Query(alias="upcomingOnly")] = False,
    featured_only: Annotated[bool, Query(alias="featuredOnly")] = False,
    skip: int = 0,
    limit: int = Query(100, le=500),
):
    """List events, soonest first."""
    stmt = select(Event)
    if upcoming_only:
        stmt = stmt.where(Event.is_upcoming.is_(True))
    if featured_only:
        stmt = stmt.where(Event.is_featured.is_(True))
    result = await db.execute(stmt.order_by(Event.event_date).offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/featured", response_model=list[EventResponse])
async def list_featured_events(db: Annotated[AsyncSession, Depends(get_db)]):
    result = await db.execute(
        select(Event)
        .where(Event.is_featured.is_(True), Event.is_upcoming.is_(True))
        .order_by(Event.event_date)
        .limit(FEATURED_LIMIT)
    )
    return result.scalars().all()


@router.get("/upcoming", response_model=list[EventResponse])
async def list_upcoming_events(db: Annotated[AsyncSession, Depends(get_db)]):
    result = await db.execute(
        select(Event).where(Event.is_upcoming.is_(True)).order_by(Event.event_date)
    )
    return result.scalars().all()


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, db: Annotated[AsyncSession, Depends(get_db)]):
    return await get_event_or_404(db, event_id)


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    event = Event(**event_data.model_dump(), created_by_id=user.id)
    db.add(event)
    await db.commit()
    await db.refresh(event)

    log.info(f"Event {event.id} created by {user.id}")
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_EVENTS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    event = await get_event_or_404(db, event_id)
    for field, value in event_data.model_dump(exclude_unset=True).items():
        if value is None and field in ("title", "event_date", "is_upcoming"):
            continue
        setattr(event, field, value)

    await db.commit()
    await db.refresh(event)
    return event


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    actor: Annotated[Principal, Depends(require_permission(Permission.MANAGE_EVENTS))],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    event = await get_event_or_404(db, event_id)
    await db.delete(event)
    await db.commit()
    return {"message": "Event deleted successfully"}
