"""SQLAlchemy model for registered accounts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from veilpost.db.session import Base
from veilpost.db.time import utcnow

if TYPE_CHECKING:
    from .direct_message import DirectMessage
    from .post import Post


class User(Base):
    """A registered account that owns posts and receives anonymous feedback.

    ``username`` is unique only among verified accounts; an unverified sign-up
    may reuse a name until someone verifies it. Once verified the username is
    never changed, which keeps ``Post.username`` consistent.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verify_code: Mapped[str] = mapped_column(String(6), nullable=False)
    verify_code_expiry: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Legacy per-user gate for direct messages; posts carry their own flag.
    is_accepting_messages: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    messages: Mapped[list[DirectMessage]] = relationship(
        "DirectMessage",
        back_populates="recipient",
        cascade="all, delete-orphan",
        order_by="DirectMessage.id",
    )
    posts: Mapped[list[Post]] = relationship(
        "Post",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
