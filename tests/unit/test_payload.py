"""Unit tests for hubhook.payload."""

from __future__ import annotations

import urllib.parse

import msgspec
import pytest

from hubhook.errors import MalformedPayloadError
from hubhook.events import Event
from hubhook.payload import (
    IssueCommentAction,
    IssueCommentPayload,
    PingPayload,
    PullRequestPayload,
    PushPayload,
    WebhookDelivery,
)
from tests.helpers.deliveries import DELIVERY_ID, ISSUE_COMMENT_BODY

_FULL_ISSUE_COMMENT = msgspec.json.encode(
    {
        "action": "edited",
        "issue": {
            "id": 1,
            "number": 42,
            "title": "Spelling error in the README file",
            "state": "open",
            "user": {"login": "octocat", "id": 1, "type": "User"},
        },
        "comment": {
            "id": 99,
            "body": "You are totally right! I'll get this fixed right away.",
            "user": {"login": "hubot", "id": 2},
            "created_at": "2024-01-01T00:00:00Z",
        },
        "repository": {
            "id": 1296269,
            "name": "Hello-World",
            "full_name": "octocat/Hello-World",
            "owner": {"login": "octocat", "id": 1},
            "default_branch": "main",
            "topics": ["unused", "fields", "are", "ignored"],
        },
        "sender": {"login": "hubot", "id": 2},
    }
)


def _delivery(
    body: bytes,
    event: Event = Event.ISSUE_COMMENT,
    content_type: str = "application/json",
) -> WebhookDelivery:
    return WebhookDelivery(
        event=event,
        event_name=event.value,
        delivery_id=DELIVERY_ID,
        body=body,
        headers={"content-type": content_type},
    )


class TestJson:
    """Tests for untyped decoding."""

    def test_decodes_body(self) -> None:
        """json() returns plain Python objects."""
        assert _delivery(ISSUE_COMMENT_BODY).json() == {"action": "created"}

    def test_each_call_returns_a_fresh_document(self) -> None:
        """Mutating one decoded document does not affect the next call."""
        delivery = _delivery(ISSUE_COMMENT_BODY)
        first = delivery.json()
        first["action"] = "deleted"
        assert delivery.json() == {"action": "created"}

    def test_invalid_json_raises_malformed_payload(self) -> None:
        """Undecodable bodies raise MalformedPayloadError."""
        with pytest.raises(MalformedPayloadError, match="not valid JSON"):
            _delivery(b"{not json").json()

    def test_form_encoded_body_is_unwrapped(self) -> None:
        """Form-encoded deliveries carry the JSON in a payload field."""
        body = urllib.parse.urlencode({"payload": '{"action":"created"}'}).encode()
        delivery = _delivery(body, content_type="application/x-www-form-urlencoded")
        assert delivery.json() == {"action": "created"}
        assert delivery.payload().action is IssueCommentAction.CREATED

    def test_form_encoded_body_without_payload_field(self) -> None:
        """A form body without the payload field is malformed."""
        body = urllib.parse.urlencode({"other": "value"}).encode()
        delivery = _delivery(body, content_type="application/x-www-form-urlencoded")
        with pytest.raises(MalformedPayloadError, match="payload"):
            delivery.json()


class TestParse:
    """Tests for typed decoding."""

    def test_issue_comment_with_only_action(self) -> None:
        """Only the action is required for issue comment payloads."""
        payload = _delivery(ISSUE_COMMENT_BODY).parse(IssueCommentPayload)
        assert payload.action is IssueCommentAction.CREATED
        assert payload.repository is None

    def test_full_issue_comment(self) -> None:
        """Nested structures decode and unknown fields are ignored."""
        payload = _delivery(_FULL_ISSUE_COMMENT).parse(IssueCommentPayload)
        assert payload.action is IssueCommentAction.EDITED
        assert payload.repository is not None
        assert payload.repository.full_name == "octocat/Hello-World"
        assert payload.issue is not None
        assert payload.issue.number == 42
        assert payload.comment is not None
        assert payload.comment.user is not None
        assert payload.comment.user.login == "hubot"

    def test_unknown_action_is_schema_mismatch(self) -> None:
        """Values outside the action enum raise MalformedPayloadError."""
        delivery = _delivery(b'{"action":"exploded"}')
        with pytest.raises(MalformedPayloadError) as excinfo:
            delivery.parse(IssueCommentPayload)
        assert excinfo.value.target == "IssueCommentPayload"

    def test_custom_struct(self) -> None:
        """Callers can decode into their own structs."""

        class ActionOnly(msgspec.Struct):
            action: str

        assert _delivery(ISSUE_COMMENT_BODY).parse(ActionOnly) == ActionOnly(
            action="created"
        )

    def test_mutable_structs_are_not_shared(self) -> None:
        """Each parse builds a new instance."""

        class Mutable(msgspec.Struct):
            action: str

        delivery = _delivery(ISSUE_COMMENT_BODY)
        first = delivery.parse(Mutable)
        first.action = "deleted"
        assert delivery.parse(Mutable).action == "created"


class TestPayload:
    """Tests for the event-specific shape lookup."""

    @pytest.mark.parametrize(
        ("event", "body", "shape"),
        [
            (Event.ISSUE_COMMENT, ISSUE_COMMENT_BODY, IssueCommentPayload),
            (Event.PING, b'{"zen":"Design for failure.","hook_id":7}', PingPayload),
            (Event.PULL_REQUEST, b'{"action":"opened","number":3}', PullRequestPayload),
            (
                Event.PUSH,
                b'{"ref":"refs/heads/main","before":"a","after":"b","commits":'
                b'[{"id":"b","message":"Fix","added":["x.py"]}]}',
                PushPayload,
            ),
        ],
    )
    def test_representative_shapes(
        self, event: Event, body: bytes, shape: type[msgspec.Struct]
    ) -> None:
        """Events with a registered shape decode into it."""
        assert isinstance(_delivery(body, event).payload(), shape)

    def test_push_commits(self) -> None:
        """Push payloads expose their commits."""
        body = (
            b'{"ref":"refs/heads/main","before":"a","after":"b","commits":'
            b'[{"id":"b","message":"Fix","added":["x.py"]}]}'
        )
        payload = _delivery(body, Event.PUSH).payload()
        assert [commit.id for commit in payload.commits] == ["b"]
        assert payload.commits[0].added == ("x.py",)
        assert payload.commits[0].removed == ()

    def test_events_without_shape_fall_back_to_json(self) -> None:
        """Other events return the untyped document."""
        delivery = _delivery(b'{"starred_at":null}', Event.STAR)
        assert delivery.payload() == {"starred_at": None}


class TestDelivery:
    """Tests for delivery metadata."""

    def test_headers_are_read_only(self) -> None:
        """Handlers cannot mutate the shared header mapping."""
        delivery = _delivery(ISSUE_COMMENT_BODY)
        with pytest.raises(TypeError):
            delivery.headers["x-new"] = "value"  # type: ignore[index]

    def test_repr_omits_body(self) -> None:
        """The repr shows metadata, not payload contents."""
        text = repr(_delivery(ISSUE_COMMENT_BODY))
        assert "created" not in text
        assert DELIVERY_ID in text

    def test_content_type_ignores_parameters(self) -> None:
        """Charset parameters are stripped from the media type."""
        delivery = _delivery(b"{}", content_type="application/json; charset=utf-8")
        assert delivery.content_type == "application/json"
