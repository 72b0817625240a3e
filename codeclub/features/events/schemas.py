"""
Pydantic schemas for events.
"""
from datetime import datetime
from pydantic import Field

from codeclub.core.schemas import APIModel


class EventBase(APIModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    event_date: datetime
    location: str | None = Field(None, max_length=255)
    image_url: str | None = Field(None, max_length=500)
    registration_url: str | None = Field(None, max_length=500)


class EventCreate(EventBase):
    pass


class EventUpdate(APIModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    event_date: datetime | None = None
    location: str | None = Field(None, max_length=255)
    image_url: str | None = Field(None, max_length=500)
    registration_url: str | None = Field(None, max_length=500)
    is_upcoming: bool | None = None


class EventResponse(EventBase):
    id: str
    is_featured: bool
    is_upcoming: bool
    created_by_id: str | None = None
    created_at: datetime
    updated_at: datetime


class EventFeatured(APIModel):
    is_featured: bool
