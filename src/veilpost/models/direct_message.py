"""Legacy anonymous direct messages addressed to a user."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from veilpost.db.session import Base
from veilpost.db.time import utcnow

if TYPE_CHECKING:
    from .user import User


class DirectMessage(Base):
    """Anonymous message delivered to a user's inbox.

    Superseded by post replies but still reachable through the legacy
    send/get/delete message endpoints. Sender identity is never stored.
    """

    __tablename__ = "direct_message"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    recipient: Mapped[User] = relationship("User", back_populates="messages")
