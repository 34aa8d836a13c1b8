"""Data access helpers for accounts and their direct messages."""
from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from veilpost.models.direct_message import DirectMessage
from veilpost.models.user import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str, *, verified_only: bool = False) -> User | None:
        """Return the account holding ``username``, preferring a verified one."""
        stmt = select(User).where(User.username == username)
        if verified_only:
            stmt = stmt.where(User.is_verified.is_(True))
        stmt = stmt.order_by(User.is_verified.desc(), User.id)
        return self.session.execute(stmt).scalars().first()

    def get_by_email(self, email: str) -> User | None:
        return self.session.execute(select(User).where(User.email == email)).scalars().first()

    def get_by_identifier(self, identifier: str) -> User | None:
        """Return the account whose email or username equals ``identifier``."""
        stmt = (
            select(User)
            .where(or_(User.email == identifier.lower(), User.username == identifier))
            .order_by(User.is_verified.desc(), User.id)
        )
        return self.session.execute(stmt).scalars().first()

    def add(self, user: User) -> User:
        self.session.add(user)
        self.session.flush()
        return user

    def list_messages(self, user_id: int) -> list[DirectMessage]:
        """Return the user's direct messages newest first."""
        stmt = (
            select(DirectMessage)
            .where(DirectMessage.recipient_id == user_id)
            .order_by(DirectMessage.created_at.desc(), DirectMessage.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def add_message(self, user: User, content: str) -> DirectMessage:
        message = DirectMessage(recipient_id=user.id, content=content)
        self.session.add(message)
        self.session.flush()
        return message

    def get_message(self, user_id: int, message_id: int) -> DirectMessage | None:
        stmt = select(DirectMessage).where(
            DirectMessage.id == message_id,
            DirectMessage.recipient_id == user_id,
        )
        return self.session.execute(stmt).scalars().first()

    def delete_message(self, message: DirectMessage) -> None:
        self.session.delete(message)
        self.session.flush()
