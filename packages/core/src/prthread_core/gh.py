"""GitHub API helpers for opening threads outside the webhook path."""

from __future__ import annotations

from github import Github

from prthread_core.events import OpenedEvent


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def opened_event_from_pull(repo_name: str, pr) -> OpenedEvent:
    """Build the OpenedEvent GitHub would have delivered for a live pull request.

    Reviewers are the ones currently requested, which may differ from the set
    requested when the pull request was actually opened.
    """
    users, _teams = pr.get_review_requests()
    return OpenedEvent.model_validate(
        {
            "pull_request": {
                "id": pr.id,
                "number": pr.number,
                "title": pr.title or "",
                "html_url": pr.html_url,
                "user": {"login": pr.user.login},
                "requested_reviewers": [{"login": u.login} for u in users],
            },
            "repository": {"full_name": repo_name},
        }
    )
