from __future__ import annotations

from typing import Iterable

from .types import ChangeEntry, ChangeRecord, GroupedChanges


def group(records: Iterable[ChangeRecord]) -> GroupedChanges:
    groups: GroupedChanges = {}
    for r in records:
        # no de-dupe: the same path twice is two entries
        groups.setdefault(r.action, []).append(ChangeEntry(path=r.path, object_type=r.object_type))
    return groups
