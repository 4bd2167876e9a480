"""backfill command — open a thread for a pull request that has none."""

from __future__ import annotations

import click
from rich.console import Console

from prthread_core.gh import get_pull, get_repo, opened_event_from_pull

console = Console()


@click.command("backfill")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.pass_context
def backfill_cmd(ctx, repo: str, pr_number: int):
    """Post the opening thread for an existing pull request.

    For pull requests opened before prthread was deployed, or whose "opened"
    webhook was lost. Later review, comment and close events then land in
    the new thread.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI)
      SLACK_BOT_TOKEN      Slack bot token
    """
    from prthread_cli.auth import resolve_github_token
    from prthread_cli.wiring import build_orchestrator

    config = ctx.obj["config"]
    store = ctx.obj["store"]

    token = resolve_github_token(config)
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")

    orchestrator = build_orchestrator(config, store)

    pr = get_pull(get_repo(repo, token=token), pr_number)
    event = opened_event_from_pull(repo, pr)
    key = event.review_unit.correlation_key

    existing = store.get(key)
    if existing is not None:
        raise click.UsageError(f"{key} already has a thread ({existing.thread_handle}).")

    result = orchestrator.handle_event(event)
    if not result.ok:
        raise click.ClickException(f"Backfill failed while {result.failed_stage.value}: {result.error}")

    binding = store.get(key)
    console.print(f"[green]Opened thread[/green] {binding.thread_handle if binding else '?'} for {key}")
