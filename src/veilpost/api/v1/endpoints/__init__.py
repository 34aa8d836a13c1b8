"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .messages import router as messages_router
from .posts import router as posts_router
from .suggestions import router as suggestions_router
from .system import router as system_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "messages_router",
    "posts_router",
    "suggestions_router",
    "system_router",
    "users_router",
]
