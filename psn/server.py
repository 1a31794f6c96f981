from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from .dispatcher import Dispatcher
from .log import configure_logging
from .schema import NotificationPayload, ValidationFailure
from .settings import Settings
from .slack import SlackClient

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    client: SlackClient
    dispatcher: Dispatcher


def make_state(settings: Settings | None = None) -> AppState:
    st = settings or Settings()
    client = SlackClient(st)
    return AppState(settings=st, client=client, dispatcher=Dispatcher(client=client, settings=st))


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"ok": False, "error": message})


def create_app(state: AppState | None = None) -> FastAPI:
    """Build the app. ``uvicorn psn.server:create_app --factory`` for a real run."""
    if state is None:
        st = Settings()
        configure_logging(st.log_level)
        state = make_state(st)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("plastic-slack-notifier ready (mock_slack=%s)", state.settings.mock_slack)
        yield
        await state.client.aclose()

    app = FastAPI(title="plastic-slack-notifier", version="0.1.0", lifespan=lifespan)
    app.state.psn = state

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > state.settings.max_body_bytes:
            logger.error("Rejected request body of %s bytes", length)
            return _error(413, "Request body too large")
        return await call_next(request)

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.error("Error processing %s %s", request.method, request.url.path, exc_info=exc)
        return PlainTextResponse("Internal server error", status_code=500)

    async def notify(request: Request, channel: str):
        body = await request.body()
        if len(body) > state.settings.max_body_bytes:
            return _error(413, "Request body too large")

        try:
            raw = json.loads(body or b"null")
            payload = NotificationPayload.model_validate(raw)
            req = payload.to_request()
        except (ValueError, ValidationError, ValidationFailure) as exc:
            logger.error("Invalid notification payload for %s: %s", channel, exc)
            return _error(400, f"Invalid payload: {exc}")

        logger.debug(
            "Received notification for channel %s (%d change entries)", channel, len(req.raw_change_entries)
        )

        outcome = await state.dispatcher.dispatch(req, channel)
        for w in outcome.warnings:
            logger.warning("Notification to %s partially failed: %s", channel, w)

        if not outcome.ok:
            return _error(500, f"Failed to send notification to Slack: {outcome.reason}")

        out = asdict(outcome)
        out.pop("warnings")
        return {**out, "channel": channel}

    @app.get("/health")
    def health():
        return {
            "ok": True,
            "mock_slack": state.settings.mock_slack,
            "default_channel": state.settings.slack_channel,
        }

    @app.post("/notify/{channel}")
    async def notify_channel(channel: str, request: Request):
        return await notify(request, channel)

    @app.post("/notify")
    async def notify_default(request: Request):
        """Backwards-compatible route; channel comes from SLACK_CHANNEL."""
        if not state.settings.slack_channel:
            logger.error("SLACK_CHANNEL is not set")
            return _error(400, "SLACK_CHANNEL is not set")
        return await notify(request, state.settings.slack_channel)

    return app
