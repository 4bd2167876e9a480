"""Typed GitHub webhook events.

Only the fields prthread reads are modelled; anything else in the payload is
ignored. Each event variant knows which pull request it is about
(``review_unit``) and whether it starts a Slack thread (``opens_thread``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, Field


class UnitKind(str, Enum):
    PULL_REQUEST = "pull_request"


@dataclass(frozen=True)
class ReviewUnit:
    """The pull request a thread is about."""

    repository: str
    number: int
    kind: UnitKind = UnitKind.PULL_REQUEST

    @property
    def correlation_key(self) -> str:
        # Repository-qualified: issue_comment payloads carry the PR number but
        # not the pull request's global id, so the number is the shared identity.
        return f"{self.repository}#{self.number}"


# ---------------------------------------------------------------------------
# Payload fragments
# ---------------------------------------------------------------------------


class User(BaseModel):
    login: str


class Team(BaseModel):
    name: str
    slug: str = ""


class Repository(BaseModel):
    full_name: str


class PullRequest(BaseModel):
    id: int
    number: int
    title: str
    html_url: str
    user: User
    requested_reviewers: list[User] = Field(default_factory=list)
    merged: bool = False
    merged_by: Optional[User] = None


class Issue(BaseModel):
    number: int
    title: str = ""
    html_url: str = ""


class Comment(BaseModel):
    id: int
    body: str = ""
    html_url: str = ""
    user: User


# ---------------------------------------------------------------------------
# Event variants
# ---------------------------------------------------------------------------


class _PullRequestEvent(BaseModel):
    pull_request: PullRequest
    repository: Repository

    @property
    def review_unit(self) -> ReviewUnit:
        return ReviewUnit(self.repository.full_name, self.pull_request.number)


class OpenedEvent(_PullRequestEvent):
    action_name: ClassVar[str] = "opened"
    opens_thread: ClassVar[bool] = True


class ReviewRequestedEvent(_PullRequestEvent):
    action_name: ClassVar[str] = "review_requested"
    opens_thread: ClassVar[bool] = False

    # GitHub sends requested_team instead when a team is asked to review.
    requested_reviewer: Optional[User] = None
    requested_team: Optional[Team] = None


class ClosedEvent(_PullRequestEvent):
    action_name: ClassVar[str] = "closed"
    opens_thread: ClassVar[bool] = False


class CommentCreatedEvent(BaseModel):
    action_name: ClassVar[str] = "created"
    opens_thread: ClassVar[bool] = False

    issue: Issue
    comment: Comment
    repository: Repository

    @property
    def review_unit(self) -> ReviewUnit:
        return ReviewUnit(self.repository.full_name, self.issue.number)


TypedEvent = Union[OpenedEvent, ReviewRequestedEvent, CommentCreatedEvent, ClosedEvent]
