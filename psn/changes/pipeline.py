from __future__ import annotations

import logging
from typing import Iterable

from .group import group
from .parse import parse
from .types import ChangeRecord, GroupedChanges, ParseFailure

logger = logging.getLogger(__name__)


def collect(raw_entries: Iterable[str]) -> tuple[GroupedChanges, list[ParseFailure]]:
    records: list[ChangeRecord] = []
    failures: list[ParseFailure] = []

    # P
    for raw in raw_entries:
        out = parse(raw)
        if isinstance(out, ParseFailure):
            logger.error("Could not parse change entry %r: %s", out.raw, out.reason)
            failures.append(out)
            continue
        records.append(out)

    # G
    return group(records), failures
