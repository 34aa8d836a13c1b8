"""AI reply suggestions backed by an OpenAI-compatible completion API.

One request per call: no retry, no caching. The model is instructed to emit
exactly three suggestions separated by ``||``; :func:`parse_suggestions`
turns whatever comes back into at most three trimmed strings. A model that
ignores the delimiter yields a single suggestion holding the whole text.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from veilpost.core.errors import UpstreamError
from veilpost.core.settings import settings

logger = logging.getLogger(__name__)

DELIMITER = "||"
MAX_SUGGESTIONS = 3

SYSTEM_PROMPT = (
    "You generate concise, friendly reply suggestions for an anonymous conversation app. "
    "Each suggestion must be a complete message. "
    "Keep tone encouraging, kind, and natural. "
    "Avoid emojis unless the context calls for them. "
    "Never repeat the user's post. "
    "Output exactly 3 suggestions separated by `||` with no numbering or labels."
)


class CompletionError(RuntimeError):
    """Raised when the completion API call fails or returns an unusable body."""


@dataclass(frozen=True)
class CompletionConfig:
    """Connection settings for the completion API."""

    base_url: str
    api_key: str | None
    model: str
    temperature: float
    timeout_seconds: float


@dataclass(frozen=True)
class Suggestions:
    """Parsed suggestions and the raw text they were split from."""

    items: list[str]
    raw: str


def load_completion_config() -> CompletionConfig:
    """Build configuration object from global settings."""
    return CompletionConfig(
        base_url=settings.completion_base_url,
        api_key=settings.completion_api_key,
        model=settings.completion_model,
        temperature=settings.completion_temperature,
        timeout_seconds=float(settings.completion_timeout_seconds),
    )


def build_prompt(post_content: str | None, user_draft: str | None) -> str:
    """Return the user-turn instruction for the available context."""
    post_content = (post_content or "").strip()
    user_draft = (user_draft or "").strip()
    if post_content and user_draft:
        return (
            f'User wrote a post: "{post_content}"\n'
            f'They are currently typing this reply: "{user_draft}"\n'
            "Make suggestions that continue or complete their thought."
        )
    if post_content:
        return (
            f'User wrote a post: "{post_content}"\n'
            "Generate 3 thoughtful reply suggestions."
        )
    return "Generate 3 friendly, encouraging reply suggestions."


def parse_suggestions(text: str) -> list[str]:
    """Split delimited completion text into at most three non-empty suggestions."""
    pieces = (piece.strip() for piece in text.split(DELIMITER))
    return [piece for piece in pieces if piece][:MAX_SUGGESTIONS]


class CompletionClient:
    """HTTP client wrapper for the chat-completions endpoint."""

    def __init__(
        self,
        config: CompletionConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_completion_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def complete(self, system: str, prompt: str) -> str:
        """Return the assistant text for a single system + user exchange."""
        client = await self._ensure_client()
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.config.temperature,
        }
        try:
            response = await client.post("/chat/completions", json=payload, headers=self._headers())
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise CompletionError("Completion response missing message content") from exc
        if not isinstance(content, str):
            raise CompletionError("Completion response content is not text")
        return content

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class SuggestionService:
    """Builds the prompt, calls the model once and parses the result."""

    def __init__(self, client: CompletionClient) -> None:
        self._client = client

    async def suggest(self, post_content: str | None, user_draft: str | None) -> Suggestions:
        """Return up to three reply suggestions.

        Raises:
            UpstreamError: If the completion call fails.
        """
        prompt = build_prompt(post_content, user_draft)
        try:
            text = await self._client.complete(SYSTEM_PROMPT, prompt)
        except CompletionError as exc:
            logger.error("Suggestion generation failed: %s", exc, exc_info=True)
            raise UpstreamError("Failed to generate suggestions") from exc

        items = parse_suggestions(text)
        if len(items) < MAX_SUGGESTIONS:
            logger.debug("Completion returned %d suggestion(s)", len(items))
        return Suggestions(items=items, raw=text)


class _CompletionClientSingleton:
    """Singleton wrapper for CompletionClient."""

    _instance: CompletionClient | None = None

    @classmethod
    def get_instance(cls) -> CompletionClient:
        """Get or create the singleton CompletionClient instance."""
        if cls._instance is None:
            cls._instance = CompletionClient()
        return cls._instance


def get_completion_client() -> CompletionClient:
    """Return a singleton completion client instance."""
    return _CompletionClientSingleton.get_instance()


def get_suggestion_service() -> SuggestionService:
    """Return a suggestion service over the shared completion client."""
    return SuggestionService(get_completion_client())
