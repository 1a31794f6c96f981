"""Inbound payload of the Plastic SCM trigger.

The trigger posts its environment as JSON; ``INPUT`` is itself a JSON-encoded
array of change entries (see psn.changes.parse).
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field

from .dispatcher import NotificationRequest


class ValidationFailure(ValueError):
    """The inbound envelope cannot be turned into a NotificationRequest."""


class NotificationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user: str | None = Field(default=None, alias="PLASTIC_USER")
    machine: str | None = Field(default=None, alias="PLASTIC_CLIENTMACHINE")
    content: str | None = None
    input: str | None = Field(default=None, alias="INPUT")

    def to_request(self) -> NotificationRequest:
        if not self.input:
            raise ValidationFailure("Missing INPUT in request body")
        try:
            entries = json.loads(self.input)
        except json.JSONDecodeError as exc:
            raise ValidationFailure(f"INPUT is not valid JSON: {exc.msg}") from exc
        if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
            raise ValidationFailure("INPUT must be a JSON array of strings")

        return NotificationRequest(
            author=self.user,
            machine=self.machine,
            content=self.content,
            raw_change_entries=tuple(entries),
        )
