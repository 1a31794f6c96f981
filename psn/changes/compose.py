"""Slack text for a notification: the summary and one block per action group.

Slack mrkdwn is used as-is (``*bold*``). Nothing here splits long messages;
the dispatcher refuses oversize blocks instead.
"""

from __future__ import annotations

from typing import Sequence

from .types import ACTIONS, ChangeEntry, GroupedChanges

ACTION_LABELS = {
    "AD": "Added",
    "CH": "Changed",
    "DE": "Deleted",
    "RE": "Renamed",
    "MV": "Moved",
}

DIR_ICON = "📁"
FILE_ICON = "📝"

SEPARATOR = "✄┈┈┈┈┈┈┈┈┈┈┈┈┈"

UNKNOWN = "Unknown"
NO_CONTENT = "No content provided"


def icon_for(object_type: str) -> str:
    return DIR_ICON if object_type == "DIR" else FILE_ICON


def compose(action: str, entries: Sequence[ChangeEntry]) -> str:
    label = ACTION_LABELS.get(action, UNKNOWN)
    lines = [f"*Files {label}*"]
    for e in entries:
        lines.append(f"{icon_for(e.object_type)} {e.path}")
    lines.append(SEPARATOR)
    return "\n".join(lines) + "\n\n"


def compose_summary(author: str | None, machine: str | None, content: str | None) -> str:
    return (
        f"\n*Author*: {author or UNKNOWN}/{machine or UNKNOWN}\n"
        f"\n{content or NO_CONTENT}\n"
    )


def renderable_actions(groups: GroupedChanges) -> list[str]:
    """Recognized action codes present in ``groups``, in send priority order."""
    return [a for a in ACTIONS if groups.get(a)]
