"""Unit tests for hubhook.events."""

from __future__ import annotations

import pytest

from hubhook.events import Event


class TestFromHeader:
    """Tests for Event.from_header()."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("issue_comment", Event.ISSUE_COMMENT),
            ("pull_request", Event.PULL_REQUEST),
            ("push", Event.PUSH),
            ("ping", Event.PING),
        ],
    )
    def test_known_values(self, header: str, expected: Event) -> None:
        """Known wire names resolve to their members."""
        assert Event.from_header(header) is expected

    @pytest.mark.parametrize(
        "header",
        [None, "", "some_future_event", "Issue_Comment", "PUSH", " push", "unknown"],
    )
    def test_unrecognised_values_are_unknown(self, header: str | None) -> None:
        """Absent, unknown and differently-cased names resolve to UNKNOWN."""
        assert Event.from_header(header) is Event.UNKNOWN

    def test_every_member_round_trips(self) -> None:
        """Each member's value is its own wire name."""
        for member in Event:
            if member is Event.UNKNOWN:
                continue
            assert Event.from_header(member.value) is member, member


class TestParse:
    """Tests for the strict Event.parse()."""

    def test_accepts_members(self) -> None:
        """Members pass through unchanged."""
        assert Event.parse(Event.PUSH) is Event.PUSH

    def test_accepts_wire_names(self) -> None:
        """Wire names are converted."""
        assert Event.parse("issue_comment") is Event.ISSUE_COMMENT

    def test_accepts_unknown(self) -> None:
        """Handlers can be registered for UNKNOWN by name."""
        assert Event.parse("unknown") is Event.UNKNOWN

    def test_rejects_typos(self) -> None:
        """Unknown names fail at registration time."""
        with pytest.raises(ValueError, match="issue_coment"):
            Event.parse("issue_coment")


def test_str_is_wire_name() -> None:
    """StrEnum members format as their wire names in log lines."""
    assert f"{Event.ISSUE_COMMENT}" == "issue_comment"
