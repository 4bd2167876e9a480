"""Credential resolution for commands that talk to Slack or GitHub.

Slack credentials come from the environment only (a bot token is never
something a developer has lying around in a local session). GitHub tokens,
needed only by `prthread backfill`, fall back to the GitHub CLI:
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` (GitHub CLI session — works after `gh auth login`)
"""

from __future__ import annotations

import logging
import subprocess

import click

logger = logging.getLogger(__name__)


def resolve_github_token(config: dict) -> str | None:
    """Return a GitHub token from config/env or the gh CLI, or None."""
    if config.get("github_token"):
        return config["github_token"]

    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None

    token = result.stdout.strip() if result.returncode == 0 else ""
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
        return token
    return None


def require_slack_credentials(config: dict) -> tuple[str, str]:
    """Return (bot token, channel id) or raise a UsageError naming what is missing."""
    token = config.get("slack_token")
    channel = config.get("slack_channel")
    if not token:
        raise click.UsageError("SLACK_BOT_TOKEN environment variable is not set.")
    if not channel:
        raise click.UsageError("No Slack channel configured. Set SLACK_CHANNEL_ID or `slack_channel` in .prthread.yml.")
    return token, channel
