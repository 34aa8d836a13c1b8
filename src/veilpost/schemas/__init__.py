"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ApiResponse
from .direct_message import DirectMessageCreate, DirectMessageOut, MessagesEnvelope
from .post import (
    PostCreate,
    PostEnvelope,
    PostListEnvelope,
    PostOut,
    PostSummary,
    PublicPostsEnvelope,
    ReplyCreate,
    ReplyOut,
    ToggleAccepting,
    ToggleEnvelope,
)
from .suggestion import SuggestionEnvelope, SuggestRequest
from .user import (
    AcceptMessagesEnvelope,
    AcceptMessagesRequest,
    ProfileEnvelope,
    SignInRequest,
    SignUpRequest,
    TokenEnvelope,
    UserProfile,
    VerifyCodeRequest,
)

__all__ = [
    "ApiResponse",
    "DirectMessageCreate", "DirectMessageOut", "MessagesEnvelope",
    "PostCreate", "PostEnvelope", "PostListEnvelope", "PostOut", "PostSummary",
    "PublicPostsEnvelope", "ReplyCreate", "ReplyOut", "ToggleAccepting", "ToggleEnvelope",
    "SuggestionEnvelope", "SuggestRequest",
    "AcceptMessagesEnvelope", "AcceptMessagesRequest", "ProfileEnvelope", "SignInRequest",
    "SignUpRequest", "TokenEnvelope", "UserProfile", "VerifyCodeRequest",
]
