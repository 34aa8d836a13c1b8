"""Data access helpers for working with posts and replies."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from veilpost.models.post import Post, Reply

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier, replies loaded."""
        result = self.session.execute(
            select(Post).options(selectinload(Post.replies)).where(Post.id == post_id)
        )
        return result.scalars().first()

    def list_for_owner(self, owner_id: int, *, with_replies: bool = True) -> list[Post]:
        """Return the owner's posts newest first."""
        stmt = select(Post).where(Post.owner_id == owner_id)
        if with_replies:
            stmt = stmt.options(selectinload(Post.replies))
        # id breaks timestamp ties so the order is stable within a query.
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        return list(self.session.execute(stmt).scalars())

    def create(self, *, owner_id: int, username: str, content: str) -> Post:
        """Insert a new post accepting replies and return the persisted instance."""
        post = Post(
            owner_id=owner_id,
            username=username,
            content=content,
            is_accepting_messages=True,
            replies=[],
        )
        self.session.add(post)
        self.session.flush()
        return post

    def add_reply(self, post: Post, content: str) -> Reply:
        """Append a reply to ``post``; the store assigns its id."""
        reply = Reply(content=content)
        post.replies.append(reply)
        self.session.flush()
        return reply

    def remove_reply(self, post: Post, reply_id: int) -> bool:
        """Drop the reply with ``reply_id`` from ``post``. Returns False if absent."""
        remaining = [reply for reply in post.replies if reply.id != reply_id]
        if len(remaining) == len(post.replies):
            return False
        post.replies = remaining
        self.session.flush()
        return True

    def delete(self, post: Post) -> None:
        """Delete a post; its replies go with it."""
        self.session.delete(post)
        self.session.flush()
