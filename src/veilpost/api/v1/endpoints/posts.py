"""Post and reply endpoints for the Veilpost API."""

from fastapi import APIRouter, status

from veilpost.models import Post
from veilpost.schemas.common import ApiResponse
from veilpost.schemas.post import (
    PostCreate,
    PostEnvelope,
    PostListEnvelope,
    PostOut,
    ReplyCreate,
    ReplyOut,
    ToggleAccepting,
    ToggleEnvelope,
)
from veilpost.services import post_service

from ..dependencies import (
    ClientIdDep,
    CurrentUserDep,
    OptionalUserDep,
    RateLimiterDep,
    SessionDep,
)

router = APIRouter(prefix="/posts", tags=["posts"])


def to_post_out(post: Post, *, include_replies: bool) -> PostOut:
    """Convert a Post ORM instance to an API schema, optionally with replies."""
    return PostOut(
        id=post.id,
        username=post.username,
        content=post.content,
        is_accepting_messages=post.is_accepting_messages,
        created_at=post.created_at,
        replies=(
            [ReplyOut.model_validate(reply) for reply in post.replies]
            if include_replies
            else None
        ),
    )


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    limiter: RateLimiterDep,
) -> PostEnvelope:
    """Create a new post owned by the caller."""
    limiter.enforce("post", f"user:{current_user.id}")
    post = post_service.create_post(db, current_user, post_data.content)
    return PostEnvelope(
        message="Post created successfully",
        post=to_post_out(post, include_replies=True),
    )


@router.get("", response_model=PostListEnvelope)
async def list_my_posts(current_user: CurrentUserDep, db: SessionDep) -> PostListEnvelope:
    """List the caller's posts, newest first, with their replies."""
    posts = post_service.list_owned_posts(db, current_user)
    return PostListEnvelope(
        posts=[to_post_out(post, include_replies=True) for post in posts],
    )


@router.get("/{post_id}/details", response_model=PostEnvelope)
async def get_post_details(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> PostEnvelope:
    """Return a post. Replies are included only for the post's owner."""
    view = post_service.get_post_detail(db, post_id, viewer)
    return PostEnvelope(post=to_post_out(view.post, include_replies=view.replies_visible))


@router.delete("/{post_id}", response_model=ApiResponse)
async def delete_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> ApiResponse:
    """Delete one of the caller's posts and all of its replies."""
    post_service.delete_post(db, current_user, post_id)
    return ApiResponse(message="Post deleted successfully")


@router.patch("/{post_id}/toggle-messages", response_model=ToggleEnvelope)
async def toggle_messages(
    post_id: int,
    toggle: ToggleAccepting,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ToggleEnvelope:
    """Open or close a post for new replies."""
    accepting = post_service.toggle_accepting(
        db, current_user, post_id, toggle.is_accepting_messages
    )
    state = "accepting" if accepting else "not accepting"
    return ToggleEnvelope(message=f"Post is now {state} messages", is_accepting_messages=accepting)


@router.post(
    "/{post_id}/replies",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reply(
    post_id: int,
    reply_data: ReplyCreate,
    db: SessionDep,
    limiter: RateLimiterDep,
    client_id: ClientIdDep,
) -> ApiResponse:
    """Send an anonymous reply. No authentication is required."""
    limiter.enforce("message", client_id)
    post_service.create_reply(db, post_id, reply_data.content)
    return ApiResponse(message="Reply sent successfully")


@router.delete("/{post_id}/replies/{reply_id}", response_model=ApiResponse)
async def delete_reply(
    post_id: int,
    reply_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ApiResponse:
    """Delete a reply from one of the caller's posts."""
    post_service.delete_reply(db, current_user, post_id, reply_id)
    return ApiResponse(message="Reply deleted successfully")
