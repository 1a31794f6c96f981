from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from .changes.compose import compose, compose_summary, renderable_actions
from .changes.pipeline import collect
from .changes.types import ChangeEntry
from .settings import Settings
from .slack import SendFailure

logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    async def send(self, text: str, channel: str, thread_ts: str | None = None) -> str: ...


@dataclass(frozen=True)
class NotificationRequest:
    author: str | None = None
    machine: str | None = None
    content: str | None = None
    raw_change_entries: tuple[str, ...] = ()


@dataclass
class Outcome:
    ok: bool
    reason: str | None = None
    thread_ts: str | None = None
    sent: list[str] = field(default_factory=list)        # action codes delivered
    warnings: list[str] = field(default_factory=list)    # non-fatal group failures

    @classmethod
    def failed(cls, reason: str) -> "Outcome":
        return cls(ok=False, reason=reason)


@dataclass
class Dispatcher:
    client: ChatClient
    settings: Settings

    async def dispatch(self, request: NotificationRequest, channel: str) -> Outcome:
        try:
            return await self._dispatch(request, channel)
        except Exception as exc:
            logger.exception("Unexpected error dispatching notification to %s", channel)
            return Outcome.failed(f"internal error: {exc}")

    async def _dispatch(self, request: NotificationRequest, channel: str) -> Outcome:
        # 1) summary; its ts anchors every reply, so nothing else goes out without it
        summary = compose_summary(request.author, request.machine, request.content)
        try:
            thread_ts = await self.client.send(summary, channel)
        except SendFailure as exc:
            logger.error("Summary send to %s failed: %s", channel, exc)
            return Outcome.failed("summary send failed")
        if not thread_ts:
            logger.error("Summary send to %s returned no ts; not sending replies", channel)
            return Outcome.failed("summary send failed")

        # 2) parse + group
        groups, failures = collect(request.raw_change_entries)
        if failures:
            logger.warning("Skipped %d unparseable change entries", len(failures))

        # 3) one threaded reply per recognized action, concurrently
        actions = renderable_actions(groups)
        results = await asyncio.gather(
            *(self._send_group(a, groups[a], channel, thread_ts) for a in actions),
            return_exceptions=True,
        )

        outcome = Outcome(ok=True, thread_ts=thread_ts)
        for action, err in zip(actions, results):
            if err is None:
                outcome.sent.append(action)
            elif isinstance(err, BaseException):
                logger.error("Unexpected error sending %s files to %s", action, channel, exc_info=err)
                outcome.warnings.append(f"{action}: {err!r}")
            else:
                outcome.warnings.append(err)

        logger.info(
            "Notification sent to %s (thread_ts=%s, groups=%s, warnings=%d)",
            channel, thread_ts, ",".join(outcome.sent) or "-", len(outcome.warnings),
        )
        return outcome

    async def _send_group(self, action: str, entries: list[ChangeEntry], channel: str, thread_ts: str) -> str | None:
        """Send one group; returns an error string instead of raising."""
        text = compose(action, entries)
        if len(text) > self.settings.max_message_chars:
            msg = f"{action}: message too long ({len(text)} > {self.settings.max_message_chars} chars, {len(entries)} entries)"
            logger.error("Not sending %s files to %s: %s", action, channel, msg)
            return msg
        try:
            await self.client.send(text, channel, thread_ts)
        except SendFailure as exc:
            logger.error("Error sending %s files to %s: %s", action, channel, exc)
            return f"{action}: {exc}"
        return None
