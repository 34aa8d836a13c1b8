"""Direct message Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import ApiResponse, CamelModel


class DirectMessageCreate(CamelModel):
    """Schema for sending an anonymous message to a user."""

    username: str = Field(..., min_length=1)
    content: str


class DirectMessageOut(CamelModel):
    """A message as shown in its recipient's inbox."""

    id: int
    content: str
    created_at: datetime


class MessagesEnvelope(ApiResponse):
    """Response carrying the caller's inbox, newest first."""

    messages: list[DirectMessageOut]
