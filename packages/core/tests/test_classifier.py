"""Tests for envelope decoding and event classification."""

import json

import pytest

from prthread_core.classifier import classify, decode_envelope
from prthread_core.errors import MalformedEnvelope, SchemaMismatch, UnrecognizedAction
from prthread_core.events import ClosedEvent, CommentCreatedEvent, OpenedEvent, ReviewRequestedEvent

REPO = {"full_name": "owner/repo"}


def _pull_request(number=42, reviewers=()):
    return {
        "id": 900000 + number,
        "number": number,
        "title": "Fix auth bug",
        "html_url": f"https://github.com/owner/repo/pull/{number}",
        "user": {"login": "octocat"},
        "requested_reviewers": [{"login": r} for r in reviewers],
    }


def _comment_envelope(number=42):
    return {
        "action": "created",
        "issue": {"number": number, "title": "Fix auth bug", "html_url": "https://github.com/owner/repo/pull/42"},
        "comment": {"id": 7, "body": "Looks good", "html_url": "https://x/c/7", "user": {"login": "hubot"}},
        "repository": REPO,
    }


# ---------------------------------------------------------------------------
# decode_envelope
# ---------------------------------------------------------------------------


class TestDecodeEnvelope:
    def test_decodes_json_object(self):
        assert decode_envelope(b'{"action": "opened"}') == {"action": "opened"}

    def test_invalid_json_is_malformed(self):
        with pytest.raises(MalformedEnvelope):
            decode_envelope(b"{not json")

    def test_non_utf8_is_malformed(self):
        with pytest.raises(MalformedEnvelope):
            decode_envelope(b"\xff\xfe\x00")

    def test_json_array_is_malformed(self):
        with pytest.raises(MalformedEnvelope):
            decode_envelope(b"[1, 2]")

    def test_nesting_too_deep_to_decode_is_malformed(self):
        body = b'{"action": "opened", "x": ' + b"[" * 100000 + b"]" * 100000 + b"}"

        with pytest.raises(MalformedEnvelope):
            decode_envelope(body)


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:
    def test_missing_discriminator_is_malformed(self):
        with pytest.raises(MalformedEnvelope):
            classify({"pull_request": _pull_request(), "repository": REPO})

    def test_non_string_discriminator_is_malformed(self):
        with pytest.raises(MalformedEnvelope):
            classify({"action": 3})

    def test_unknown_action_is_unrecognized(self):
        with pytest.raises(UnrecognizedAction) as exc:
            classify({"action": "labeled", "pull_request": _pull_request(), "repository": REPO})
        assert exc.value.action == "labeled"

    def test_recognized_action_with_bad_payload_is_schema_mismatch(self):
        with pytest.raises(SchemaMismatch):
            classify({"action": "opened", "pull_request": {"number": "not-a-number"}, "repository": REPO})

    def test_recognized_action_missing_repository_is_schema_mismatch(self):
        with pytest.raises(SchemaMismatch):
            classify({"action": "closed", "pull_request": _pull_request()})

    def test_opened(self):
        event = classify({"action": "opened", "pull_request": _pull_request(reviewers=["a", "b"]), "repository": REPO})

        assert isinstance(event, OpenedEvent)
        assert event.opens_thread is True
        assert [r.login for r in event.pull_request.requested_reviewers] == ["a", "b"]

    def test_review_requested(self):
        event = classify(
            {
                "action": "review_requested",
                "pull_request": _pull_request(),
                "requested_reviewer": {"login": "hubot"},
                "repository": REPO,
            }
        )
        assert isinstance(event, ReviewRequestedEvent)
        assert event.requested_reviewer.login == "hubot"
        assert event.opens_thread is False

    def test_review_requested_for_team(self):
        event = classify(
            {
                "action": "review_requested",
                "pull_request": _pull_request(),
                "requested_team": {"name": "Backend", "slug": "backend"},
                "repository": REPO,
            }
        )
        assert event.requested_reviewer is None
        assert event.requested_team.name == "Backend"

    def test_comment_created(self):
        event = classify(_comment_envelope())
        assert isinstance(event, CommentCreatedEvent)
        assert event.comment.user.login == "hubot"

    def test_closed(self):
        pr = {**_pull_request(), "merged": True, "merged_by": {"login": "octocat"}}
        event = classify({"action": "closed", "pull_request": pr, "repository": REPO})
        assert isinstance(event, ClosedEvent)
        assert event.pull_request.merged is True

    def test_custom_discriminator_field(self):
        envelope = {"kind": "opened", "pull_request": _pull_request(), "repository": REPO}
        assert isinstance(classify(envelope, discriminator="kind"), OpenedEvent)

    def test_extra_fields_are_ignored(self):
        envelope = {"action": "opened", "pull_request": _pull_request(), "repository": REPO, "sender": {"x": 1}}
        assert isinstance(classify(envelope), OpenedEvent)

    def test_classify_does_not_mutate_envelope(self):
        envelope = _comment_envelope()
        snapshot = json.dumps(envelope, sort_keys=True)
        classify(envelope)
        assert json.dumps(envelope, sort_keys=True) == snapshot


# ---------------------------------------------------------------------------
# Correlation keys
# ---------------------------------------------------------------------------


class TestCorrelationKeys:
    def test_every_variant_for_one_pull_request_shares_a_key(self):
        events = [
            classify({"action": "opened", "pull_request": _pull_request(), "repository": REPO}),
            classify({"action": "review_requested", "pull_request": _pull_request(), "repository": REPO}),
            classify({"action": "closed", "pull_request": _pull_request(), "repository": REPO}),
            classify(_comment_envelope()),
        ]
        assert {e.review_unit.correlation_key for e in events} == {"owner/repo#42"}

    def test_same_number_in_different_repositories_differs(self):
        a = classify({"action": "opened", "pull_request": _pull_request(), "repository": {"full_name": "o/a"}})
        b = classify({"action": "opened", "pull_request": _pull_request(), "repository": {"full_name": "o/b"}})
        assert a.review_unit.correlation_key != b.review_unit.correlation_key
