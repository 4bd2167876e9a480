"""Tests for the FastAPI webhook transport."""

import json
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from prthread_cli.webhook import create_app
from prthread_core.dispatcher import Dispatcher
from prthread_core.orchestrator import WebhookOrchestrator
from prthread_core.rendering import MessageRenderer
from prthread_store.memory import MemoryStore

REPO = {"full_name": "owner/repo"}


def _pull_request(number=42):
    return {
        "id": 900000 + number,
        "number": number,
        "title": "Fix auth bug",
        "html_url": f"https://github.com/owner/repo/pull/{number}",
        "user": {"login": "octocat"},
    }


def _make_client(path="/webhook"):
    store = MemoryStore()
    slack = MagicMock()
    slack.post_message.return_value = "T1"
    orchestrator = WebhookOrchestrator(store, Dispatcher(slack, MessageRenderer()))
    return TestClient(create_app(orchestrator, path=path)), store, slack


def _post(client, payload, path="/webhook"):
    return client.post(path, content=json.dumps(payload), headers={"Content-Type": "application/json"})


class TestWebhookEndpoint:
    def test_opened_returns_done(self):
        client, store, _ = _make_client()

        resp = _post(client, {"action": "opened", "pull_request": _pull_request(), "repository": REPO})

        assert resp.status_code == 200
        assert resp.json() == {"message": "Webhook done."}
        assert store.get("owner/repo#42").thread_handle == "T1"

    def test_closed_replies_in_bound_thread(self):
        client, _, slack = _make_client()
        _post(client, {"action": "opened", "pull_request": _pull_request(), "repository": REPO})

        resp = _post(client, {"action": "closed", "pull_request": _pull_request(), "repository": REPO})

        assert resp.status_code == 200
        assert slack.post_threaded_message.call_args.args[0] == "T1"

    def test_unknown_action_is_200(self):
        client, store, slack = _make_client()

        resp = _post(client, {"action": "synchronize", "pull_request": _pull_request(), "repository": REPO})

        assert resp.status_code == 200
        assert resp.json() == {"message": "Webhook done."}
        slack.post_message.assert_not_called()
        assert store.list_bindings() == []

    def test_malformed_body_is_400(self):
        client, _, _ = _make_client()

        resp = client.post("/webhook", content=b"not json", headers={"Content-Type": "application/json"})

        assert resp.status_code == 400
        assert resp.json() == {"message": "Bad Request"}

    def test_deeply_nested_body_is_400_json(self):
        client, _, _ = _make_client()
        body = b'{"action": "opened", "x": ' + b"[" * 100000 + b"]" * 100000 + b"}"

        resp = client.post("/webhook", content=body, headers={"Content-Type": "application/json"})

        assert resp.status_code == 400
        assert resp.json() == {"message": "Bad Request"}

    def test_unbound_comment_is_500(self):
        client, _, slack = _make_client()
        payload = {
            "action": "created",
            "issue": {"number": 99},
            "comment": {"id": 1, "body": "hi", "user": {"login": "hubot"}},
            "repository": REPO,
        }

        resp = _post(client, payload)

        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal Server Error"}
        slack.post_threaded_message.assert_not_called()

    def test_custom_path(self):
        client, _, _ = _make_client(path="/hooks/github")

        resp = _post(client, {"action": "labeled"}, path="/hooks/github")

        assert resp.status_code == 200

    def test_only_post_is_exposed(self):
        client, _, _ = _make_client()
        assert client.get("/webhook").status_code == 405
        assert client.get("/docs").status_code == 404
