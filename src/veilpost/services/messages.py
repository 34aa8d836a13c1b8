"""Legacy anonymous direct messages addressed to a user."""
from __future__ import annotations

import re

from sqlalchemy.orm import Session

from veilpost.core.errors import Forbidden, NotFound, ValidationFailed
from veilpost.core.settings import settings
from veilpost.models.direct_message import DirectMessage
from veilpost.models.user import User
from veilpost.repositories.user_repo import UserRepository
from veilpost.services.post_service import committing, validate_content

_SCRIPT_RE = re.compile(r"<(script|style)\b[^>]*>.*?(?:</\1\s*>|$)", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[a-zA-Z/!?][^>]*(?:>|$)")


def strip_markup(content: str) -> str:
    """Reduce ``content`` to plain text.

    Script and style elements are dropped with their bodies; any other tag,
    including one left unclosed at the end of the text, is removed and its
    text kept. A ``<`` not followed by a tag name (``<3``) is left alone.
    This is not a full HTML parser: messages are stored and served as plain
    text, never rendered as markup.
    """
    return _TAG_RE.sub("", _SCRIPT_RE.sub("", content))


def send_message(db: Session, username: str, content: str) -> DirectMessage:
    """Deliver an anonymous message to the verified user ``username``.

    Raises:
        ValidationFailed: If nothing but markup or whitespace was submitted.
        NotFound: If no such user exists.
        Forbidden: If the user is not accepting messages.
    """
    cleaned = strip_markup(content)
    if not cleaned.strip():
        raise ValidationFailed("Message content cannot be empty")
    cleaned = validate_content(cleaned, max_length=settings.message_max_length, label="Message")

    repo = UserRepository(db)
    user = repo.get_by_username(username, verified_only=True)
    if user is None:
        raise NotFound("User not found")
    if not user.is_accepting_messages:
        raise Forbidden("User is not accepting messages")

    with committing(db, "send message"):
        message = repo.add_message(user, cleaned)
    return message


def list_messages(db: Session, user: User) -> list[DirectMessage]:
    """Return the user's inbox, newest first."""
    return UserRepository(db).list_messages(user.id)


def delete_message(db: Session, user: User, message_id: int) -> None:
    """Delete one of the user's own messages.

    Raises:
        NotFound: If the message does not exist or belongs to someone else.
    """
    repo = UserRepository(db)
    message = repo.get_message(user.id, message_id)
    if message is None:
        raise NotFound("Message not found or already deleted")
    with committing(db, "delete message"):
        repo.delete_message(message)
