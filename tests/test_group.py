"""Tests for grouping and the parse+group pipeline."""

import logging

from psn.changes.group import group
from psn.changes.pipeline import collect
from psn.changes.types import ChangeEntry, ChangeRecord


def rec(action, path, object_type="FILE"):
    return ChangeRecord(action=action, path=path, object_type=object_type, metadata="m")


class TestGroup:
    def test_keeps_order_within_action(self):
        groups = group([rec("AD", "/1"), rec("CH", "/2"), rec("AD", "/3"), rec("AD", "/4", "DIR")])
        assert groups["AD"] == [
            ChangeEntry("/1", "FILE"),
            ChangeEntry("/3", "FILE"),
            ChangeEntry("/4", "DIR"),
        ]
        assert groups["CH"] == [ChangeEntry("/2", "FILE")]

    def test_is_a_partition(self):
        records = [rec(a, f"/{i}") for i, a in enumerate(["AD", "CH", "ZZ", "AD", "MV", "ZZ"])]
        groups = group(records)
        assert sum(len(v) for v in groups.values()) == len(records)
        for r in records:
            assert ChangeEntry(r.path, r.object_type) in groups[r.action]

    def test_no_dedupe(self):
        groups = group([rec("CH", "/same"), rec("CH", "/same")])
        assert len(groups["CH"]) == 2

    def test_unknown_action_is_grouped(self):
        groups = group([rec("ZZ", "/a"), rec("ZZ", "/b")])
        assert [e.path for e in groups["ZZ"]] == ["/a", "/b"]

    def test_empty(self):
        assert group([]) == {}

    def test_deterministic(self):
        records = [rec("AD", "/a"), rec("DE", "/b"), rec("AD", "/c")]
        assert group(records) == group(records)


class TestCollect:
    def test_skips_bad_entries_and_keeps_the_rest(self, caplog):
        raw = [
            'AD "/a" FILE#m',
            "garbage line",
            'AD "/b" DIR#m',
        ]
        with caplog.at_level(logging.ERROR):
            groups, failures = collect(raw)

        assert [e.path for e in groups["AD"]] == ["/a", "/b"]
        assert [f.raw for f in failures] == ["garbage line"]
        assert "garbage line" in caplog.text

    def test_all_bad(self):
        groups, failures = collect(["x", "y"])
        assert groups == {}
        assert len(failures) == 2
