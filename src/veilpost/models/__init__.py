"""SQLAlchemy models for the Veilpost application."""

from .direct_message import DirectMessage
from .post import Post, Reply
from .user import User

__all__ = [
    "DirectMessage",
    "Post", "Reply",
    "User",
]
