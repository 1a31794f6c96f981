"""Slack Web API wrapper.

Supports:
- real Slack (SLACK_TOKEN), via chat.postMessage
- mock mode (MOCK_SLACK=1) so the server and CLI run without network/tokens.

Important: This project NEVER reads tokens from source code.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any

import httpx

from .settings import Settings

logger = logging.getLogger(__name__)


class SendFailure(RuntimeError):
    """Raised when Slack did not accept a message."""


class SlackClient:
    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not settings.mock_slack and not settings.slack_token:
            raise RuntimeError("SLACK_TOKEN is not set. Set it or run with MOCK_SLACK=1")

        self.settings = settings
        self._client: httpx.AsyncClient | None = None
        if not settings.mock_slack:
            self._client = httpx.AsyncClient(
                base_url=settings.slack_api_url.rstrip("/"),
                headers={
                    "Authorization": f"Bearer {settings.slack_token}",
                    "Content-Type": "application/json; charset=utf-8",
                },
                timeout=settings.slack_timeout,
                transport=transport,
            )
        self._mock_seq = itertools.count(1)

    async def __aenter__(self) -> "SlackClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    def _mock_ts(self) -> str:
        # Slack ts look like "1700000000.000100"
        return f"{int(time.time())}.{next(self._mock_seq):06d}"

    async def send(self, text: str, channel: str, thread_ts: str | None = None) -> str:
        """Post ``text`` to ``channel``, optionally as a reply in ``thread_ts``.

        Returns the new message's ts. Raises SendFailure otherwise.
        """
        payload: dict[str, Any] = {"channel": channel, "text": text}
        if thread_ts:
            payload["thread_ts"] = str(thread_ts)

        logger.debug("Sending message to channel %s (thread_ts=%s, %d chars)", channel, thread_ts, len(text))

        if self._client is None:
            ts = self._mock_ts()
            logger.info("[mock slack] #%s ts=%s thread_ts=%s\n%s", channel, ts, thread_ts, text)
            return ts

        try:
            resp = await self._client.post("/chat.postMessage", json=payload)
        except httpx.HTTPError as exc:
            raise SendFailure(f"transport error: {exc}") from exc

        if resp.status_code >= 400:
            raise SendFailure(f"HTTP {resp.status_code} from chat.postMessage")

        try:
            data = resp.json()
        except ValueError as exc:
            raise SendFailure("chat.postMessage returned a non-JSON body") from exc

        if not data.get("ok"):
            raise SendFailure(f"slack error: {data.get('error', 'unknown_error')}")

        ts = data.get("ts")
        if not ts:
            raise SendFailure("chat.postMessage response has no ts")
        return ts
