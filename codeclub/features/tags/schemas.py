"""
Pydantic schemas for tags.
"""
from pydantic import Field

from codeclub.core.schemas import APIModel


class TagCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=100)


class TagResponse(APIModel):
    id: str
    name: str
