"""serve command — run the webhook receiver."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prthread_cli.webhook import create_app
from prthread_cli.wiring import build_orchestrator

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


@click.command("serve")
@click.option("--host", default=None, help="Interface to bind. Overrides config file.")
@click.option("--port", type=int, default=None, help="Port to listen on. Overrides config file.")
@click.pass_context
def serve_cmd(ctx, host: str | None, port: int | None):
    """Receive GitHub pull request webhooks and mirror them into Slack threads.

    \b
    Required environment variables:
      SLACK_BOT_TOKEN      Bot token with chat:write scope
      SLACK_CHANNEL_ID     Channel to post threads in (or `slack_channel` in config)
    """
    import uvicorn

    config = ctx.obj["config"]
    store = ctx.obj["store"]

    orchestrator = build_orchestrator(config, store)
    app = create_app(orchestrator, path=config["webhook_path"])

    _configure_logging(str(config["log_level"]))

    host = host or config["host"]
    port = port or int(config["port"])
    console.print(
        f"Listening for webhooks on [bold]http://{host}:{port}{config['webhook_path']}[/bold] "
        f"(store: [cyan]{config['store']}[/cyan])"
    )
    # log_config=None keeps uvicorn's records flowing through the RichHandler above.
    uvicorn.run(app, host=host, port=port, log_level=str(config["log_level"]).lower(), log_config=None)
