"""Post and reply Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import ApiResponse, CamelModel


class PostCreate(CamelModel):
    """Schema for creating a new post. Bounds are enforced by the post service."""

    content: str = Field(..., description="Post text")


class ReplyCreate(CamelModel):
    """Schema for an anonymous reply."""

    content: str = Field(..., description="Reply text")


class ToggleAccepting(CamelModel):
    """Schema for switching a post's accepting-replies flag."""

    is_accepting_messages: bool


class ReplyOut(CamelModel):
    """A reply as shown to the owner of its post."""

    id: int
    content: str
    created_at: datetime


class PostSummary(CamelModel):
    """Post fields safe for list views; replies are never included."""

    id: int
    username: str
    content: str
    is_accepting_messages: bool
    created_at: datetime


class PostOut(PostSummary):
    """Full post. ``replies`` is null unless the caller owns the post."""

    replies: list[ReplyOut] | None = None


class PostEnvelope(ApiResponse):
    """Response carrying a single post."""

    post: PostOut


class PostListEnvelope(ApiResponse):
    """Response carrying the caller's own posts, replies included."""

    posts: list[PostOut]


class PublicPostsEnvelope(ApiResponse):
    """Response carrying a user's posts for the public profile page."""

    username: str
    posts: list[PostSummary]


class ToggleEnvelope(ApiResponse):
    """Response carrying the accepting flag after an update."""

    is_accepting_messages: bool
