"""Tests for Slack message text."""

from psn.changes.compose import (
    DIR_ICON,
    FILE_ICON,
    SEPARATOR,
    compose,
    compose_summary,
    renderable_actions,
)
from psn.changes.types import ChangeEntry


class TestCompose:
    def test_single_added_file(self):
        text = compose("AD", [ChangeEntry("/a", "FILE")])
        lines = text.splitlines()
        assert lines[0] == "*Files Added*"
        assert lines[1] == f"{FILE_ICON} /a"
        assert lines[2] == SEPARATOR
        assert text.count(FILE_ICON) == 1
        assert text.endswith(SEPARATOR + "\n\n")

    def test_icons_by_type(self):
        text = compose("CH", [ChangeEntry("/d", "DIR"), ChangeEntry("/f", "FILE"), ChangeEntry("/l", "LINK")])
        assert text.splitlines()[1:4] == [f"{DIR_ICON} /d", f"{FILE_ICON} /f", f"{FILE_ICON} /l"]

    def test_labels(self):
        for code, label in [("CH", "Changed"), ("DE", "Deleted"), ("RE", "Renamed"), ("MV", "Moved")]:
            assert compose(code, [ChangeEntry("/x", "FILE")]).startswith(f"*Files {label}*\n")

    def test_unknown_label(self):
        assert compose("ZZ", [ChangeEntry("/x", "FILE")]).startswith("*Files Unknown*\n")


class TestSummary:
    def test_fields(self):
        text = compose_summary("alice", "ws-01", "Fix textures")
        assert "*Author*: alice/ws-01" in text
        assert "Fix textures" in text

    def test_defaults(self):
        text = compose_summary(None, "", None)
        assert "*Author*: Unknown/Unknown" in text
        assert "No content provided" in text


class TestRenderableActions:
    def test_priority_order_and_filter(self):
        groups = {
            "MV": [ChangeEntry("/m", "FILE")],
            "ZZ": [ChangeEntry("/z", "FILE")],
            "AD": [ChangeEntry("/a", "FILE")],
            "DE": [ChangeEntry("/d", "FILE")],
        }
        assert renderable_actions(groups) == ["AD", "DE", "MV"]

    def test_only_unknown(self):
        assert renderable_actions({"ZZ": [ChangeEntry("/a", "FILE"), ChangeEntry("/b", "FILE")]}) == []
