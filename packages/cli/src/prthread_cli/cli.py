"""CLI entry point for prthread.

Commands:
  serve     — run the webhook receiver that mirrors pull requests into Slack threads
  bindings  — list stored pull request → thread bindings
  bind      — repair a missing binding by hand
  backfill  — open a thread for a pull request that predates the deployment
"""

from __future__ import annotations

import importlib.metadata

import click
from rich.console import Console

from prthread_cli.commands.backfill import backfill_cmd
from prthread_cli.commands.bindings import bind_cmd, bindings_cmd
from prthread_cli.commands.serve import serve_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .prthread.yml settings.

    Store selection:
      store: sqlite → SQLiteStore (store_path or .prthread.db) — the default
      store: memory → MemoryStore (bindings vanish on restart)

    This factory lives in cli.py so neither prthread_core nor prthread_store
    know about the config file format.
    """
    store_type = config.get("store", "sqlite")

    if store_type == "sqlite":
        from prthread_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=config.get("store_path", ".prthread.db"))

    if store_type == "memory":
        from prthread_store.memory import MemoryStore

        console.print("[yellow]Using the in-memory store: thread bindings are lost on restart.[/yellow]")
        return MemoryStore()

    raise click.UsageError(f"Unknown store: {store_type!r}. Choose 'sqlite' or 'memory'.")


@click.group()
@click.version_option(
    version=importlib.metadata.version("prthread"),
    prog_name="prthread",
)
@click.option(
    "--config",
    "config_path",
    default=".prthread.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRTHREAD_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """Mirror GitHub pull request activity into one Slack thread per pull request."""
    from prthread_core.config import load_config

    ctx.ensure_object(dict)

    config = load_config(config_path)
    store = _build_store(config)
    ctx.obj["config"] = config
    ctx.obj["store"] = store
    ctx.call_on_close(store.close)


main.add_command(serve_cmd)
main.add_command(bindings_cmd)
main.add_command(bind_cmd)
main.add_command(backfill_cmd)
