"""GitHub webhook event kinds.

GitHub names the kind of every delivery in the ``X-GitHub-Event`` header.
:class:`Event` enumerates the kinds this package knows about; the wire value
of each member is the header string. Anything else resolves to
:attr:`Event.UNKNOWN` so new GitHub event types are accepted rather than
rejected.

Examples
--------
>>> Event.from_header("issue_comment")
<Event.ISSUE_COMMENT: 'issue_comment'>
>>> Event.from_header("some_future_event")
<Event.UNKNOWN: 'unknown'>

"""

from __future__ import annotations

import enum
import types

EVENT_HEADER = "x-github-event"
DELIVERY_HEADER = "x-github-delivery"


class Event(enum.StrEnum):
    """Kinds of GitHub webhook deliveries."""

    BRANCH_PROTECTION_RULE = "branch_protection_rule"
    CHECK_RUN = "check_run"
    CHECK_SUITE = "check_suite"
    CODE_SCANNING_ALERT = "code_scanning_alert"
    COMMIT_COMMENT = "commit_comment"
    CREATE = "create"
    DELETE = "delete"
    DEPENDABOT_ALERT = "dependabot_alert"
    DEPLOY_KEY = "deploy_key"
    DEPLOYMENT = "deployment"
    DEPLOYMENT_STATUS = "deployment_status"
    DISCUSSION = "discussion"
    DISCUSSION_COMMENT = "discussion_comment"
    FORK = "fork"
    GOLLUM = "gollum"
    INSTALLATION = "installation"
    INSTALLATION_REPOSITORIES = "installation_repositories"
    ISSUE_COMMENT = "issue_comment"
    ISSUES = "issues"
    LABEL = "label"
    MEMBER = "member"
    MEMBERSHIP = "membership"
    MERGE_GROUP = "merge_group"
    META = "meta"
    MILESTONE = "milestone"
    ORGANIZATION = "organization"
    PACKAGE = "package"
    PAGE_BUILD = "page_build"
    PING = "ping"
    PROJECT = "project"
    PROJECT_CARD = "project_card"
    PROJECT_COLUMN = "project_column"
    PUBLIC = "public"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    PULL_REQUEST_REVIEW_THREAD = "pull_request_review_thread"
    PUSH = "push"
    RELEASE = "release"
    REPOSITORY = "repository"
    REPOSITORY_DISPATCH = "repository_dispatch"
    SECRET_SCANNING_ALERT = "secret_scanning_alert"
    SECURITY_ADVISORY = "security_advisory"
    SPONSORSHIP = "sponsorship"
    STAR = "star"
    STATUS = "status"
    TEAM = "team"
    TEAM_ADD = "team_add"
    WATCH = "watch"
    WORKFLOW_DISPATCH = "workflow_dispatch"
    WORKFLOW_JOB = "workflow_job"
    WORKFLOW_RUN = "workflow_run"
    UNKNOWN = "unknown"

    @classmethod
    def from_header(cls, value: str | None) -> Event:
        """Resolve an ``X-GitHub-Event`` header value.

        Matching is exact and case-sensitive. Absent or unrecognised values
        yield :attr:`UNKNOWN`; this never raises.
        """
        if value is None:
            return cls.UNKNOWN
        return _WIRE_TABLE.get(value, cls.UNKNOWN)

    @classmethod
    def parse(cls, value: Event | str) -> Event:
        """Convert ``value`` for handler registration.

        Unlike :meth:`from_header` this is strict so that a typo in
        application configuration fails loudly.

        Raises
        ------
        ValueError
            If ``value`` is not a known wire name or ``"unknown"``.

        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"unsupported GitHub event: {value!r}"
            raise ValueError(msg) from exc


# Wire string -> Event. UNKNOWN has no wire name of its own.
_WIRE_TABLE: types.MappingProxyType[str, Event] = types.MappingProxyType(
    {member.value: member for member in Event if member is not Event.UNKNOWN}
)


__all__ = ["DELIVERY_HEADER", "EVENT_HEADER", "Event"]
