from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    success: bool = True


class OkResponse(CamelModel):
    ok: bool = True


class PersonName(CamelModel):
    first_name: str
    last_name: str
