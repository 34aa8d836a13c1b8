"""Verification email delivery through the Resend HTTP API."""

from __future__ import annotations

import logging

import httpx

from veilpost.core.errors import UpstreamError
from veilpost.core.settings import settings

logger = logging.getLogger(__name__)


class EmailSender:
    """Sends verification codes. Without an API key, codes are only logged."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        api_url: str | None = None,
        sender: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.email_api_key
        self.api_url = api_url or settings.email_api_url
        self.sender = sender or settings.email_sender
        self.timeout_seconds = timeout_seconds or settings.email_timeout_seconds
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send_verification_email(self, username: str, email: str, code: str) -> None:
        """Deliver ``code`` to ``email``.

        Raises:
            UpstreamError: If the provider rejects the message or is unreachable.
        """
        if not self.enabled:
            logger.info("Email delivery disabled; verification code for %s is %s", username, code)
            return

        payload = {
            "from": self.sender,
            "to": email.strip(),
            "subject": "Your Verification Code",
            "text": (
                f"Hello {username},\n\n"
                f"Your verification code is {code}. It expires in one hour.\n"
            ),
        }
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error sending verification email: %s", exc, exc_info=True)
            raise UpstreamError("Failed to send verification email") from exc


def get_email_sender() -> EmailSender:
    """Return an email sender configured from global settings."""
    return EmailSender()
