"""Domain error taxonomy shared by services and the HTTP layer.

Services raise these; ``veilpost.main`` renders them as
``{"success": false, "message": ...}`` with the attached status code.
The ``message`` is always safe to show to a client.
"""

from __future__ import annotations

from fastapi import status


class VeilpostError(RuntimeError):
    """Base exception for every expected application failure."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(VeilpostError):
    """Raised when no valid session accompanies a request that needs one."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class Forbidden(VeilpostError):
    """Raised when the caller is authenticated but may not act on the entity."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(VeilpostError):
    """Raised when an addressed entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationFailed(VeilpostError):
    """Raised when submitted content violates a constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class RateLimited(VeilpostError):
    """Raised when a rate-limit bucket is exhausted for the caller."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests. Please try again later."


class UpstreamError(VeilpostError):
    """Raised when a dependent external service fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Upstream service failure"


class InternalError(VeilpostError):
    """Raised for unexpected store or infrastructure failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
