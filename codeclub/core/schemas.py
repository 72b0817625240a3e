"""
Base schema shared by all features.

The frontend speaks camelCase JSON while models use snake_case attributes,
so every request/response schema accepts both and serializes camelCase.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(APIModel):
    message: str
