"""AI reply suggestion endpoint for the Veilpost API."""

from fastapi import APIRouter

from veilpost.schemas.suggestion import SuggestionEnvelope, SuggestRequest

from ..dependencies import ClientIdDep, RateLimiterDep, SuggestionServiceDep

router = APIRouter(tags=["suggestions"])


@router.post("/suggest-messages", response_model=SuggestionEnvelope)
async def suggest_messages(
    request_data: SuggestRequest,
    limiter: RateLimiterDep,
    client_id: ClientIdDep,
    service: SuggestionServiceDep,
) -> SuggestionEnvelope:
    """Return up to three reply suggestions for a post and optional draft."""
    limiter.enforce("ai", client_id)
    result = await service.suggest(request_data.post_content, request_data.user_draft)
    return SuggestionEnvelope(suggestions=result.items, raw=result.raw)
