from pydantic import BaseModel, ConfigDict, Field
import os


def _env(name: str, default: str | None = None):
    # read at Settings() time so load_dotenv() in the CLI still applies
    return Field(default_factory=lambda: os.getenv(name, default))


class Settings(BaseModel):
    # env values are strings; coerce them like explicit arguments
    model_config = ConfigDict(validate_default=True)

    slack_token: str | None = _env("SLACK_TOKEN")
    # Fallback channel for POST /notify (no channel in the path).
    slack_channel: str | None = _env("SLACK_CHANNEL")
    slack_api_url: str = _env("SLACK_API_URL", "https://slack.com/api")
    slack_timeout: float = _env("SLACK_TIMEOUT", "10")

    # If true, don't call Slack; log messages and return fake timestamps.
    mock_slack: bool = Field(default_factory=lambda: os.getenv("MOCK_SLACK", "0") == "1")

    log_level: str = _env("LOG_LEVEL", "DEBUG")

    host: str = _env("HOST", "0.0.0.0")
    port: int = _env("PORT", "3000")

    # 50mb, same as the old express json limit
    max_body_bytes: int = _env("MAX_BODY_BYTES", str(50 * 1024 * 1024))
    # Slack truncates chat.postMessage text beyond 40k chars
    max_message_chars: int = _env("MAX_MESSAGE_CHARS", "40000")
