"""Public profile endpoints for the Veilpost API."""

from fastapi import APIRouter

from veilpost.schemas.post import PostSummary, PublicPostsEnvelope
from veilpost.services import post_service

from ..dependencies import SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{username}/posts", response_model=PublicPostsEnvelope)
async def list_user_posts(username: str, db: SessionDep) -> PublicPostsEnvelope:
    """List a user's posts newest first. Replies are never included."""
    user, posts = post_service.list_public_posts(db, username)
    return PublicPostsEnvelope(
        username=user.username,
        posts=[PostSummary.model_validate(post) for post in posts],
    )
