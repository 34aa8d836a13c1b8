"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from veilpost.core.errors import Unauthenticated
from veilpost.core.security import decode_access_token
from veilpost.db.session import get_db
from veilpost.models import User
from veilpost.services.email import EmailSender, get_email_sender
from veilpost.services.rate_limit import RateLimiter, client_identifier, get_rate_limiter
from veilpost.services.suggestions import SuggestionService, get_suggestion_service
from veilpost.services.user_service import resolve_user

# HTTP Bearer scheme; missing credentials are reported as 401 by get_current_user.
bearer_scheme = HTTPBearer(auto_error=False)

BearerDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(credentials: BearerDep, db: SessionDep) -> User:
    """Get the current authenticated user from JWT token.

    Raises:
        Unauthenticated: If no bearer token is supplied or it is invalid.
        NotFound: If the token's subject no longer resolves to a stored user.
    """
    if credentials is None:
        raise Unauthenticated()
    return resolve_user(db, decode_access_token(credentials.credentials))


def get_optional_user(credentials: BearerDep, db: SessionDep) -> User | None:
    """Return the caller if a valid session accompanies the request, else None."""
    if credentials is None:
        return None
    try:
        user_id = decode_access_token(credentials.credentials)
    except Unauthenticated:
        return None
    return db.get(User, user_id)


def get_client_id(request: Request) -> str:
    """Return the caller's network identifier."""
    return client_identifier(request)


# Type aliases for injected collaborators
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
ClientIdDep = Annotated[str, Depends(get_client_id)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
EmailSenderDep = Annotated[EmailSender, Depends(get_email_sender)]
SuggestionServiceDep = Annotated[SuggestionService, Depends(get_suggestion_service)]
