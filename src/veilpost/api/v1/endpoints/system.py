"""System and transparency endpoints for the Veilpost API."""

from __future__ import annotations

from fastapi import APIRouter

from veilpost.core.settings import settings
from veilpost.services.suggestions import MAX_SUGGESTIONS

from ..dependencies import RateLimiterDep

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config(limiter: RateLimiterDep) -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings; suitable for transparency UIs.
    """
    return {
        "success": True,
        "message": "",
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
        "contentLimits": {
            "post": settings.post_max_length,
            "reply": settings.reply_max_length,
            "message": settings.message_max_length,
        },
        "rateLimits": {
            "policy": limiter.policy.value,
            "buckets": {
                bucket.name: {"limit": bucket.limit, "windowSeconds": bucket.window}
                for bucket in limiter.buckets.values()
            },
        },
        "suggestions": {
            "model": settings.completion_model,
            "maxSuggestions": MAX_SUGGESTIONS,
        },
    }
