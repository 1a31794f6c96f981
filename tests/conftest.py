"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import AsyncMock

from psn.settings import Settings


@pytest.fixture
def settings():
    """Mock-mode settings; nothing here touches the network."""
    return Settings(
        slack_token=None,
        slack_channel="builds",
        mock_slack=True,
        max_message_chars=40000,
    )


@pytest.fixture
def fake_client():
    """Chat client whose sends return increasing ts values."""
    client = AsyncMock()
    counter = {"n": 0}

    async def send(text, channel, thread_ts=None):
        counter["n"] += 1
        return f"1700000000.{counter['n']:06d}"

    client.send.side_effect = send
    return client
