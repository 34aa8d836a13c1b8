"""Reply suggestion Pydantic schemas."""

from pydantic import Field

from veilpost.core.settings import settings

from .common import ApiResponse, CamelModel


class SuggestRequest(CamelModel):
    """Context for generating reply suggestions. Both fields are optional.

    Each field is capped at the length the app would store for it.
    """

    post_content: str | None = Field(None, max_length=settings.post_max_length)
    user_draft: str | None = Field(None, max_length=settings.reply_max_length)


class SuggestionEnvelope(ApiResponse):
    """Parsed suggestions plus the raw completion text they came from."""

    suggestions: list[str] = Field(default_factory=list, max_length=3)
    raw: str = ""
