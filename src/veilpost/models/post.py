"""SQLAlchemy models for posts and their anonymous replies."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from veilpost.db.session import Base
from veilpost.db.time import utcnow

if TYPE_CHECKING:
    from .user import User


class Post(Base):
    """A prompt authored by one user that collects anonymous replies.

    Replies live in their own table but have no identity outside their post:
    the ``replies`` relationship owns them and deleting the post deletes them
    in the same transaction.
    """

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_owner_created", "owner_id", "created_at"),
        Index("ix_post_username_created", "username", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Denormalized copy of the owner's (immutable) username for public lookups.
    username: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_accepting_messages: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    owner: Mapped[User] = relationship("User", back_populates="posts")
    replies: Mapped[list[Reply]] = relationship(
        "Reply",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Reply.id",
    )


class Reply(Base):
    """Anonymous reply embedded in exactly one post. Authorship is not recorded."""

    __tablename__ = "reply"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    post: Mapped[Post] = relationship("Post", back_populates="replies")
