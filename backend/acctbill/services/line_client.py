"""LINE Messaging API push client."""

import logging
from dataclasses import dataclass

import httpx

from acctbill.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class LinePushResult:
    success: bool
    status_code: int | None = None
    error: str | None = None


class LineMessagingClient:
    """Sends text push messages to a LINE user or group.

    Never raises for transport problems: HTTP error statuses, timeouts and
    connection errors are reported through ``LinePushResult``.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.LINE_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.LINE_PUSH_TIMEOUT_SECONDS

    def push_text(self, access_token: str, to: str, text: str) -> LinePushResult:
        if not access_token:
            return LinePushResult(success=False, error="LINE access token is not configured")
        if not to:
            return LinePushResult(success=False, error="LINE recipient id is missing")

        payload = {"to": to, "messages": [{"type": "text", "text": text}]}
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
        }

        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.post(f"{self.base_url}/message/push", json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("LINE push to %s failed: %s", to, exc)
            return LinePushResult(success=False, error=str(exc)[:1000] or type(exc).__name__)

        if 200 <= resp.status_code < 300:
            return LinePushResult(success=True, status_code=resp.status_code)

        error = _error_message(resp)
        logger.warning("LINE push to %s rejected with HTTP %d: %s", to, resp.status_code, error)
        return LinePushResult(success=False, status_code=resp.status_code, error=error)


def _error_message(resp: httpx.Response) -> str:
    """Extract LINE's error message from a failed response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])[:1000]
    text = resp.text[:1000] if resp.text else ""
    return text or f"HTTP {resp.status_code}"
