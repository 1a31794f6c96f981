from __future__ import annotations

from dataclasses import dataclass

# Rendering priority; codes outside this tuple are grouped but never sent.
ACTIONS: tuple[str, ...] = ("AD", "CH", "DE", "RE", "MV")


@dataclass(frozen=True)
class ChangeRecord:
    action: str         # e.g. "CH"; not limited to ACTIONS
    path: str
    object_type: str    # "DIR", "FILE" or whatever the trigger sent
    metadata: str       # everything after '#', e.g. "br:/main;changeset:140"


@dataclass(frozen=True)
class ChangeEntry:
    path: str
    object_type: str


@dataclass(frozen=True)
class ParseFailure:
    raw: str
    reason: str


GroupedChanges = dict[str, list[ChangeEntry]]
