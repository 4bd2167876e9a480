"""bindings / bind commands — inspect and repair stored thread bindings."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from prthread_store.models import ThreadBinding

console = Console()


@click.command("bindings")
@click.option("--repo", default=None, help="Only show pull requests in this repository (owner/name).")
@click.option("--limit", default=20, show_default=True, help="Maximum number of bindings to show.")
@click.pass_context
def bindings_cmd(ctx, repo: str | None, limit: int):
    """List pull requests and the Slack threads they are bound to."""
    store = ctx.obj["store"]

    bindings = store.list_bindings(prefix=f"{repo}#" if repo else None)
    if not bindings:
        console.print("[yellow]No thread bindings found.[/yellow]")
        return

    # Most recent first, capped at --limit.
    bindings = list(reversed(bindings))[:limit]

    title = f"Thread Bindings — {repo}" if repo else "Thread Bindings"
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Pull Request", style="bold")
    table.add_column("Thread", width=20)
    table.add_column("Created At", width=20)

    for b in bindings:
        table.add_row(b.correlation_key, b.thread_handle, b.created_at[:19].replace("T", " "))

    console.print(table)


@click.command("bind")
@click.argument("correlation_key")
@click.argument("thread_handle")
@click.option("--force", is_flag=True, help="Replace an existing binding.")
@click.pass_context
def bind_cmd(ctx, correlation_key: str, thread_handle: str, force: bool):
    """Bind a pull request (owner/name#number) to an existing Slack thread.

    Use this when a thread was posted but its binding was never saved, so
    later events for the pull request fail with "no thread bound".
    THREAD_HANDLE is the Slack message timestamp, e.g. 1712345678.123456.
    """
    store = ctx.obj["store"]

    existing = store.get(correlation_key)
    if existing is not None and not force:
        raise click.UsageError(
            f"{correlation_key} is already bound to thread {existing.thread_handle}. Pass --force to replace it."
        )

    store.put(ThreadBinding(correlation_key=correlation_key, thread_handle=thread_handle))
    console.print(f"[green]Bound[/green] {correlation_key} → {thread_handle}")
