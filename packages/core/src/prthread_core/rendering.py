"""Slack mrkdwn rendering for pull request events."""

from __future__ import annotations

from typing import Optional

from prthread_core.events import (
    ClosedEvent,
    CommentCreatedEvent,
    OpenedEvent,
    ReviewRequestedEvent,
    TypedEvent,
)

REVIEWER_MESSAGE_POLICIES = ("combined", "per_reviewer")

_MAX_COMMENT_CHARS = 500


def _escape(text: str) -> str:
    """Escape the three characters Slack treats as control sequences in mrkdwn."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _link(url: str, label: str) -> str:
    if not url:
        return _escape(label)
    return f"<{url}|{_escape(label)}>"


def _quote(text: str) -> str:
    text = text.strip()
    if len(text) > _MAX_COMMENT_CHARS:
        text = text[:_MAX_COMMENT_CHARS].rstrip() + "…"
    return "\n".join(f"> {line}" for line in _escape(text).splitlines()) or "> _(empty comment)_"


class MessageRenderer:
    """Render events to message text.

    ``users`` maps GitHub logins to Slack user ids so people are pinged
    rather than just named. ``reviewer_messages`` controls how reviewers
    requested when a pull request is opened are announced: ``combined``
    (one follow-up naming everybody) or ``per_reviewer`` (one each).
    """

    def __init__(self, users: Optional[dict[str, str]] = None, reviewer_messages: str = "combined"):
        if reviewer_messages not in REVIEWER_MESSAGE_POLICIES:
            raise ValueError(
                f"Unknown reviewer_messages policy: {reviewer_messages!r}. "
                f"Choose one of {', '.join(REVIEWER_MESSAGE_POLICIES)}."
            )
        self._users = dict(users or {})
        self._reviewer_messages = reviewer_messages

    def mention(self, login: str) -> str:
        slack_id = self._users.get(login)
        if slack_id:
            return f"<@{slack_id}>"
        return f"@{_escape(login)}"

    def render_opening(self, event: OpenedEvent) -> str:
        pr = event.pull_request
        return (
            f":new: {self.mention(pr.user.login)} opened "
            f"{_link(pr.html_url, f'#{pr.number} {pr.title}')} in `{_escape(event.repository.full_name)}`"
        )

    def render_followups(self, event: OpenedEvent) -> list[str]:
        """Messages posted under the new thread straight after it is opened."""
        logins = [r.login for r in event.pull_request.requested_reviewers]
        if not logins:
            return []
        if self._reviewer_messages == "per_reviewer":
            return [self._review_request_text([login]) for login in logins]
        return [self._review_request_text(logins)]

    def render_reply(self, event: TypedEvent) -> str:
        if isinstance(event, ReviewRequestedEvent):
            return self._render_review_requested(event)
        if isinstance(event, CommentCreatedEvent):
            return self._render_comment(event)
        if isinstance(event, ClosedEvent):
            return self._render_closed(event)
        raise TypeError(f"{type(event).__name__} does not continue a thread")

    def _review_request_text(self, logins: list[str]) -> str:
        return ":eyes: Review requested from " + ", ".join(self.mention(login) for login in logins)

    def _render_review_requested(self, event: ReviewRequestedEvent) -> str:
        if event.requested_reviewer is not None:
            return self._review_request_text([event.requested_reviewer.login])
        if event.requested_team is not None:
            return f":eyes: Review requested from team `{_escape(event.requested_team.name)}`"
        return ":eyes: Review requested"

    def _render_comment(self, event: CommentCreatedEvent) -> str:
        comment = event.comment
        header = f":speech_balloon: {self.mention(comment.user.login)} {_link(comment.html_url, 'commented')}:"
        return f"{header}\n{_quote(comment.body)}"

    def _render_closed(self, event: ClosedEvent) -> str:
        pr = event.pull_request
        if pr.merged:
            by = f" by {self.mention(pr.merged_by.login)}" if pr.merged_by else ""
            return f":white_check_mark: Merged{by}"
        return ":x: Closed without merging"
