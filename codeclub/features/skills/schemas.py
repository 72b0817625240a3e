"""
Pydantic schemas for skills.
"""
from pydantic import Field

from codeclub.core.schemas import APIModel


class SkillCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str | None = Field(None, max_length=100)


class SkillUpdate(APIModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    category: str | None = Field(None, max_length=100)


class SkillResponse(APIModel):
    id: str
    name: str
    category: str | None = None
