"""Account registration, verification, sign-in and preference helpers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.orm import Session

from veilpost.core import security
from veilpost.core.errors import NotFound, Unauthenticated, ValidationFailed
from veilpost.core.settings import settings
from veilpost.db.time import as_utc, utcnow
from veilpost.models.user import User
from veilpost.repositories.user_repo import UserRepository
from veilpost.schemas.user import validate_username
from veilpost.services.email import EmailSender
from veilpost.services.post_service import committing

__all__ = [
    "SignUpResult",
    "sign_up",
    "verify_code",
    "authenticate",
    "check_username_unique",
    "set_accepting_messages",
    "resolve_user",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignUpResult:
    """Outcome of a registration attempt."""

    user: User
    created: bool


def _code_expiry() -> datetime:
    return utcnow() + timedelta(seconds=settings.verify_code_ttl_seconds)


async def sign_up(
    db: Session,
    email_sender: EmailSender,
    *,
    username: str,
    email: str,
    password: str,
) -> SignUpResult:
    """Register an unverified account, or refresh a pending one, and email a code.

    Raises:
        ValidationFailed: If the username or email is held by a verified account.
        UpstreamError: If the verification email cannot be delivered.
    """
    repo = UserRepository(db)
    if repo.get_by_username(username, verified_only=True) is not None:
        raise ValidationFailed("Username is already taken")

    code = security.generate_verify_code()
    password_hash = await run_in_threadpool(security.hash_password, password)
    existing = repo.get_by_email(email)

    with committing(db, "register user"):
        if existing is not None:
            if existing.is_verified:
                raise ValidationFailed("User already exists with this email")
            existing.username = username
            existing.password_hash = password_hash
            existing.verify_code = code
            existing.verify_code_expiry = _code_expiry()
            user, created = existing, False
        else:
            user = repo.add(
                User(
                    username=username,
                    email=email,
                    password_hash=password_hash,
                    is_verified=False,
                    verify_code=code,
                    verify_code_expiry=_code_expiry(),
                    is_accepting_messages=True,
                )
            )
            created = True

    await email_sender.send_verification_email(username, email, code)
    return SignUpResult(user=user, created=created)


def verify_code(db: Session, username: str, code: str) -> User:
    """Mark the pending account for ``username`` verified if ``code`` matches.

    Raises:
        NotFound: If no pending account uses ``username``.
        ValidationFailed: If the code is wrong or expired, or the name was
            verified by someone else in the meantime.
    """
    candidates = list(
        db.execute(
            select(User).where(User.username == username, User.is_verified.is_(False))
        ).scalars()
    )
    if not candidates:
        if UserRepository(db).get_by_username(username, verified_only=True) is not None:
            raise ValidationFailed("Account is already verified")
        raise NotFound("User not found")

    user = next((candidate for candidate in candidates if candidate.verify_code == code), None)
    if user is None:
        raise ValidationFailed("Incorrect verification code")
    if as_utc(user.verify_code_expiry) <= utcnow():
        raise ValidationFailed("Verification code has expired, please sign up again for a new code")
    if UserRepository(db).get_by_username(username, verified_only=True) is not None:
        raise ValidationFailed("Username is already taken")

    with committing(db, "verify account"):
        user.is_verified = True
    logger.info("Verified account %s", user.id)
    return user


def authenticate(db: Session, identifier: str, password: str) -> User:
    """Return the verified account matching the credentials.

    Raises:
        Unauthenticated: If the credentials are wrong or the account is unverified.
    """
    user = UserRepository(db).get_by_identifier(identifier.strip())
    if user is None or not security.verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    if not user.is_verified:
        raise Unauthenticated("Please verify your account before logging in")
    return user


def check_username_unique(db: Session, username: str) -> bool:
    """Return True if no verified account holds ``username``.

    Raises:
        ValidationFailed: If ``username`` is not a valid username.
    """
    try:
        username = validate_username(username)
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from exc
    return UserRepository(db).get_by_username(username, verified_only=True) is None


def set_accepting_messages(db: Session, user: User, accepting: bool) -> bool:
    """Update the user-level direct message gate and return the new value."""
    with committing(db, "update message preferences"):
        user.is_accepting_messages = accepting
    return accepting


def resolve_user(db: Session, user_id: int) -> User:
    """Return the stored account for a session subject.

    Raises:
        NotFound: If the session refers to an account that no longer exists.
    """
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user
