from __future__ import annotations

import re

from .types import ChangeRecord, ParseFailure

# ACTION "PATH" TYPE#METADATA, e.g.
#   CH "/Content/Textures" DIR#br:/main;changeset:140@rep:X
ENTRY_RE = re.compile(r'(\w+) "([^"]+)" (\w+)#(.+)', re.ASCII)


def parse(raw: str) -> ChangeRecord | ParseFailure:
    """Parse one change entry as sent by the Plastic trigger.

    Matching is strict (single spaces, whole string). Anything else comes back
    as a ParseFailure; this never raises for str input.
    """
    if not isinstance(raw, str):
        return ParseFailure(raw=repr(raw), reason="not a string")

    m = ENTRY_RE.fullmatch(raw)
    if not m:
        return ParseFailure(raw=raw, reason="does not match ACTION \"PATH\" TYPE#METADATA")

    action, path, object_type, metadata = m.groups()
    return ChangeRecord(action=action, path=path, object_type=object_type, metadata=metadata)
