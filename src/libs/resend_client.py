"""
Thin async client for the Resend transactional email API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from src.core.config import get_settings

logger = structlog.get_logger(__name__)


class ResendClientError(Exception):
    """Base exception for Resend client errors."""


class ResendAPIError(ResendClientError):
    """Resend answered, but not with a sent email."""

    def __init__(
        self, message: str, status_code: int | None = None, error_name: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_name = error_name


@dataclass(slots=True)
class ResendEmailResponse:
    id: str


class ResendClient:
    """POSTs to `/emails`; one short-lived HTTP connection per message."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_seconds: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = settings.resend_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.resend_base_url).rstrip("/")
        self.timeout = (
            settings.resend_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        self._transport = transport

        if not self.api_key:
            logger.warning("resend_api_key_missing", msg="RESEND_API_KEY not configured")

    async def send_email(
        self,
        *,
        from_email: str,
        to_emails: list[str],
        subject: str,
        html: str,
        text: str | None = None,
    ) -> ResendEmailResponse:
        if not self.api_key:
            raise ResendClientError("RESEND_API_KEY not configured")

        message: dict[str, Any] = {
            "from": from_email,
            "to": to_emails,
            "subject": subject,
            "html": html,
        }
        if text:
            message["text"] = text

        response = await self._post("/emails", message)
        body = _json_or_none(response)

        if response.status_code not in (200, 201):
            detail = body.get("message") if body else response.text
            raise ResendAPIError(
                f"Resend error {response.status_code}: {detail}",
                status_code=response.status_code,
                error_name=body.get("name") if body else None,
            )

        email_id = body.get("id") if body else None
        if not email_id:
            raise ResendAPIError(
                "Resend response missing email id", status_code=response.status_code
            )
        return ResendEmailResponse(id=email_id)

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Authorization": f"Bearer {self.api_key}"},
            ) as client:
                return await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise ResendClientError(f"Resend request failed: {exc}") from exc


def _json_or_none(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None
