"""Webhook deliveries as seen by handlers, and typed payload shapes.

Handlers receive a :class:`WebhookDelivery`. It exposes the raw body and
decodes it only when asked, so a handler that forwards bytes elsewhere pays no
parsing cost and a malformed body only affects handlers that try to read it.

Typed shapes are ``msgspec`` structs. Unknown fields are ignored, so the
structs describe the subset of GitHub's payloads that applications commonly
need and stay compatible as GitHub adds fields.

Usage
-----
Read the representative shape for the delivery's event::

    async def on_comment(delivery: WebhookDelivery) -> None:
        payload = delivery.payload()
        if payload.action is IssueCommentAction.CREATED:
            ...

Or decode into a struct of your own::

    class Minimal(msgspec.Struct):
        action: str

    minimal = delivery.parse(Minimal)

"""

from __future__ import annotations

import enum
import types
import typing as typ
import urllib.parse

import msgspec

from hubhook.errors import MalformedPayloadError
from hubhook.events import Event

T = typ.TypeVar("T")

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
_FORM_PAYLOAD_FIELD = "payload"


class User(msgspec.Struct, kw_only=True, frozen=True):
    """GitHub account that sent or is referenced by an event."""

    login: str
    id: int | None = None
    type: str | None = None
    html_url: str | None = None


class Repository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository an event belongs to."""

    id: int
    name: str
    full_name: str
    private: bool = False
    owner: User | None = None
    html_url: str | None = None
    default_branch: str | None = None


class Issue(msgspec.Struct, kw_only=True, frozen=True):
    """Issue, or pull request viewed through the issues API."""

    id: int
    number: int
    title: str
    state: str | None = None
    body: str | None = None
    user: User | None = None
    html_url: str | None = None


class Comment(msgspec.Struct, kw_only=True, frozen=True):
    """Comment on an issue or pull request."""

    id: int
    body: str | None = None
    user: User | None = None
    html_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class IssueCommentAction(enum.StrEnum):
    """Actions GitHub reports for ``issue_comment`` deliveries."""

    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"


class IssueCommentPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Body of an ``issue_comment`` delivery."""

    action: IssueCommentAction
    sender: User | None = None
    repository: Repository | None = None
    comment: Comment | None = None
    issue: Issue | None = None


class IssuesPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Body of an ``issues`` delivery."""

    action: str
    issue: Issue | None = None
    repository: Repository | None = None
    sender: User | None = None


class GitRef(msgspec.Struct, kw_only=True, frozen=True):
    """Head or base of a pull request."""

    ref: str
    sha: str
    label: str | None = None


class PullRequest(msgspec.Struct, kw_only=True, frozen=True):
    """Pull request attached to a ``pull_request`` delivery."""

    id: int
    number: int
    title: str
    state: str | None = None
    body: str | None = None
    user: User | None = None
    html_url: str | None = None
    head: GitRef | None = None
    base: GitRef | None = None
    draft: bool = False
    merged: bool | None = None


class PullRequestPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Body of a ``pull_request`` delivery."""

    action: str
    number: int | None = None
    pull_request: PullRequest | None = None
    repository: Repository | None = None
    sender: User | None = None


class CommitAuthor(msgspec.Struct, kw_only=True, frozen=True):
    """Git author or committer identity."""

    name: str
    email: str | None = None
    username: str | None = None


class Commit(msgspec.Struct, kw_only=True, frozen=True):
    """Commit listed in a ``push`` delivery."""

    id: str
    message: str
    timestamp: str | None = None
    url: str | None = None
    author: CommitAuthor | None = None
    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()


class PushPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Body of a ``push`` delivery."""

    ref: str
    before: str
    after: str
    created: bool = False
    deleted: bool = False
    forced: bool = False
    commits: tuple[Commit, ...] = ()
    head_commit: Commit | None = None
    pusher: CommitAuthor | None = None
    repository: Repository | None = None
    sender: User | None = None


class PingPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Body of the ``ping`` delivery GitHub sends when a hook is created."""

    zen: str | None = None
    hook_id: int | None = None
    repository: Repository | None = None
    sender: User | None = None


PAYLOAD_TYPES: types.MappingProxyType[Event, type[msgspec.Struct]] = (
    types.MappingProxyType(
        {
            Event.ISSUE_COMMENT: IssueCommentPayload,
            Event.ISSUES: IssuesPayload,
            Event.PULL_REQUEST: PullRequestPayload,
            Event.PUSH: PushPayload,
            Event.PING: PingPayload,
        }
    )
)


class WebhookDelivery:
    """One verified delivery, handed to every handler registered for it.

    Attributes
    ----------
    event
        Resolved event kind; :attr:`Event.UNKNOWN` for unrecognised headers.
    event_name
        Raw ``X-GitHub-Event`` header value, useful when ``event`` is unknown.
    delivery_id
        ``X-GitHub-Delivery`` GUID, if present. Not deduplicated here.
    body
        Raw request body.
    headers
        Request headers keyed by lower-case name.

    """

    __slots__ = (
        "_json_bytes",
        "body",
        "delivery_id",
        "event",
        "event_name",
        "headers",
    )

    def __init__(
        self,
        *,
        event: Event,
        body: bytes,
        headers: typ.Mapping[str, str],
        delivery_id: str | None = None,
        event_name: str | None = None,
    ) -> None:
        """Wrap a verified request body and its headers."""
        self.event = event
        self.event_name = event_name
        self.delivery_id = delivery_id
        self.body = body
        self.headers = types.MappingProxyType(dict(headers))
        self._json_bytes: bytes | None = None

    def __repr__(self) -> str:
        """Return a short representation without the body."""
        return (
            f"WebhookDelivery(event={self.event.value!r}, "
            f"delivery_id={self.delivery_id!r}, size={len(self.body)})"
        )

    @property
    def content_type(self) -> str:
        """Media type of the body without parameters."""
        raw = self.headers.get("content-type", "")
        return raw.split(";", 1)[0].strip().lower()

    def _document(self) -> bytes:
        """Return the JSON document, unwrapping form-encoded bodies."""
        if self._json_bytes is not None:
            return self._json_bytes

        document = self.body
        if self.content_type == _FORM_CONTENT_TYPE:
            try:
                fields = urllib.parse.parse_qs(
                    self.body.decode("utf-8"), strict_parsing=True
                )
            except (UnicodeDecodeError, ValueError) as exc:
                raise MalformedPayloadError.undecodable(exc) from exc
            values = fields.get(_FORM_PAYLOAD_FIELD)
            if not values:
                msg = "form-encoded body has no 'payload' field"
                raise MalformedPayloadError.undecodable(msg)
            document = values[0].encode("utf-8")

        self._json_bytes = document
        return document

    def json(self) -> typ.Any:  # noqa: ANN401 - arbitrary JSON document
        """Decode the body into plain Python objects.

        Each call returns a fresh document, so changes made by one handler are
        not seen by the next.

        Raises
        ------
        MalformedPayloadError
            If the body is not valid JSON.

        """
        try:
            return msgspec.json.decode(self._document())
        except msgspec.DecodeError as exc:
            raise MalformedPayloadError.undecodable(exc) from exc

    def parse(self, type_: type[T]) -> T:
        """Decode the body into a new instance of ``type_``.

        Raises
        ------
        MalformedPayloadError
            If the body is not JSON or does not match ``type_``.

        """
        target = getattr(type_, "__name__", repr(type_))
        try:
            return msgspec.json.decode(self._document(), type=type_)
        except msgspec.ValidationError as exc:
            raise MalformedPayloadError.schema_mismatch(target, exc) from exc
        except msgspec.DecodeError as exc:
            raise MalformedPayloadError.undecodable(exc) from exc

    def payload(self) -> typ.Any:  # noqa: ANN401 - shape depends on the event
        """Decode into the shape in :data:`PAYLOAD_TYPES` for this event.

        Events without a registered shape fall back to :meth:`json`.
        """
        shape = PAYLOAD_TYPES.get(self.event)
        if shape is None:
            return self.json()
        return self.parse(shape)


__all__ = [
    "PAYLOAD_TYPES",
    "Comment",
    "Commit",
    "CommitAuthor",
    "GitRef",
    "Issue",
    "IssueCommentAction",
    "IssueCommentPayload",
    "IssuesPayload",
    "PingPayload",
    "PullRequest",
    "PullRequestPayload",
    "PushPayload",
    "Repository",
    "User",
    "WebhookDelivery",
]
