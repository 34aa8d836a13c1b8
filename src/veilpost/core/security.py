"""Password hashing, verification codes and access tokens."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from nacl import pwhash
from nacl.exceptions import InvalidkeyError

from veilpost.core.errors import Unauthenticated
from veilpost.core.settings import settings

VERIFY_CODE_DIGITS = 6


def hash_password(password: str) -> str:
    """Return an Argon2id hash string for ``password``."""
    return pwhash.argon2id.str(password.encode("utf-8")).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if ``password`` matches the stored Argon2id hash."""
    try:
        return pwhash.verify(password_hash.encode("ascii"), password.encode("utf-8"))
    except InvalidkeyError:
        return False


def generate_verify_code() -> str:
    """Return a random zero-padded numeric verification code."""
    return f"{secrets.randbelow(10 ** VERIFY_CODE_DIGITS):0{VERIFY_CODE_DIGITS}d}"


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token whose subject is the user id."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Return the user id carried by ``token``.

    Raises:
        Unauthenticated: If the token is malformed, expired or has no subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise Unauthenticated("Could not validate credentials") from err

    subject = payload.get("sub")
    if subject is None:
        raise Unauthenticated("Could not validate credentials")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise Unauthenticated("Could not validate credentials") from err
