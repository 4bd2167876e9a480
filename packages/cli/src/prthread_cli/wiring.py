"""Build the long-lived collaborators from configuration.

Constructed once per process (at `serve` start-up, or per `backfill` run)
and injected into the orchestrator; never rebuilt per request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from prthread_cli.auth import require_slack_credentials
from prthread_core.dispatcher import Dispatcher
from prthread_core.orchestrator import WebhookOrchestrator
from prthread_core.rendering import MessageRenderer
from prthread_core.slack import SlackClient

if TYPE_CHECKING:
    from prthread_store.base import BaseStore


def build_renderer(config: dict) -> MessageRenderer:
    try:
        return MessageRenderer(users=config.get("users") or {}, reviewer_messages=config["reviewer_messages"])
    except ValueError as e:
        raise click.UsageError(str(e))


def build_orchestrator(config: dict, store: BaseStore) -> WebhookOrchestrator:
    token, channel = require_slack_credentials(config)
    client = SlackClient(token=token, channel=channel, timeout=int(config["slack_timeout"]))
    dispatcher = Dispatcher(client, build_renderer(config))
    return WebhookOrchestrator(store, dispatcher, discriminator=config["discriminator"])
