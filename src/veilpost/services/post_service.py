"""Ownership and visibility rules for posts and their anonymous replies.

Every mutating operation commits its own transaction. Concurrent writers on
the same post are not coordinated beyond the store's row-level semantics: a
reply racing a delete may be lost. That is accepted for low-stakes anonymous
feedback.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from veilpost.core.errors import Forbidden, InternalError, NotFound, ValidationFailed
from veilpost.core.settings import settings
from veilpost.models.post import Post, Reply
from veilpost.models.user import User
from veilpost.repositories.post_repo import PostRepository
from veilpost.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostView:
    """A post plus whether its replies may be shown to the viewer."""

    post: Post
    replies_visible: bool


def validate_content(content: str, *, max_length: int, label: str) -> str:
    """Return ``content`` trimmed, or raise if it is blank or too long.

    Args:
        content: Raw submitted text.
        max_length: Upper bound in characters, checked after trimming.
        label: Noun used in error messages ("Post", "Reply", "Message").

    Raises:
        ValidationFailed: If the trimmed text is empty or exceeds ``max_length``.
    """
    trimmed = content.strip()
    if not trimmed:
        raise ValidationFailed(f"{label} content is required")
    if len(trimmed) > max_length:
        raise ValidationFailed(f"{label} cannot exceed {max_length} characters")
    return trimmed


@contextmanager
def committing(db: Session, action: str) -> Iterator[None]:
    """Commit on success; roll back and raise InternalError on store failure."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error while %s: %s", action, exc, exc_info=True)
        raise InternalError(f"Failed to {action}") from exc


def _load_post(repo: PostRepository, post_id: int) -> Post:
    post = repo.get_by_id(post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def _require_owner(post: Post, user: User, message: str) -> None:
    if post.owner_id != user.id:
        raise Forbidden(message)


def create_post(db: Session, owner: User, content: str) -> Post:
    """Persist a new post owned by ``owner`` that accepts replies."""
    content = validate_content(content, max_length=settings.post_max_length, label="Post")
    repo = PostRepository(db)
    with committing(db, "create post"):
        post = repo.create(owner_id=owner.id, username=owner.username, content=content)
    db.refresh(post)
    return post


def list_owned_posts(db: Session, owner: User) -> list[Post]:
    """Return every post owned by ``owner``, newest first, replies loaded."""
    return PostRepository(db).list_for_owner(owner.id)


def list_public_posts(db: Session, username: str) -> tuple[User, list[Post]]:
    """Return the named user and their posts, newest first.

    Callers must render these without replies.

    Raises:
        NotFound: If no user holds ``username``.
    """
    user = UserRepository(db).get_by_username(username)
    if user is None:
        raise NotFound("User not found")
    return user, PostRepository(db).list_for_owner(user.id, with_replies=False)


def get_post_detail(db: Session, post_id: int, viewer: User | None = None) -> PostView:
    """Return a post; replies are visible only when ``viewer`` owns it."""
    post = _load_post(PostRepository(db), post_id)
    replies_visible = viewer is not None and viewer.id == post.owner_id
    return PostView(post=post, replies_visible=replies_visible)


def toggle_accepting(db: Session, owner: User, post_id: int, accepting: bool) -> bool:
    """Set the accepting-replies flag on an owned post and return the new value."""
    post = _load_post(PostRepository(db), post_id)
    _require_owner(post, owner, "Unauthorized to modify this post")
    with committing(db, "update post settings"):
        post.is_accepting_messages = accepting
    return accepting


def delete_post(db: Session, owner: User, post_id: int) -> None:
    """Delete an owned post together with all of its replies."""
    repo = PostRepository(db)
    post = _load_post(repo, post_id)
    _require_owner(post, owner, "Unauthorized to delete this post")
    with committing(db, "delete post"):
        repo.delete(post)


def create_reply(db: Session, post_id: int, content: str) -> Reply:
    """Append an anonymous reply to a post that is accepting replies.

    Raises:
        ValidationFailed: If the content is blank or too long.
        NotFound: If the post does not exist.
        Forbidden: If the post is not accepting replies.
    """
    content = validate_content(content, max_length=settings.reply_max_length, label="Reply")
    repo = PostRepository(db)
    post = _load_post(repo, post_id)
    if not post.is_accepting_messages:
        raise Forbidden("This post is not accepting replies")
    with committing(db, "send reply"):
        reply = repo.add_reply(post, content)
    return reply


def delete_reply(db: Session, owner: User, post_id: int, reply_id: int) -> bool:
    """Remove a reply from an owned post.

    Deleting a reply that is not present is a no-op, not an error.

    Returns:
        True if a reply was removed.
    """
    repo = PostRepository(db)
    post = _load_post(repo, post_id)
    _require_owner(post, owner, "Unauthorized to delete replies from this post")
    with committing(db, "delete reply"):
        removed = repo.remove_reply(post, reply_id)
    return removed
