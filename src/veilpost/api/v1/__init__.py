"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    messages_router,
    posts_router,
    suggestions_router,
    system_router,
    users_router,
)

__all__ = [
    "auth_router",
    "messages_router",
    "posts_router",
    "suggestions_router",
    "system_router",
    "users_router",
]
