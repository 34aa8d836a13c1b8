"""Shared Pydantic schemas for the response envelope."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel):
    """Envelope carried by every response: ``{success, message, ...payload}``."""

    success: bool = Field(True, description="False when the request failed.")
    message: str = Field("", description="Human-readable outcome; never internal detail.")
