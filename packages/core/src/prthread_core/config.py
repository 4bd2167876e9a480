import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "store": "sqlite",  # "sqlite" | "memory"
    "store_path": ".prthread.db",
    "discriminator": "action",
    "webhook_path": "/webhook",
    "reviewer_messages": "combined",  # "combined" | "per_reviewer"
    "users": {},  # GitHub login -> Slack user id, e.g. {"octocat": "U020E8T5PC5"}
    "slack_channel": None,
    "slack_timeout": 30,
    "host": "127.0.0.1",
    "port": 8080,
    "log_level": "INFO",
}


def load_config(config_path: str = ".prthread.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prthread.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "users": dict(DEFAULT_CONFIG["users"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Credentials only ever come from the environment.
    config["slack_token"] = os.environ.get("SLACK_BOT_TOKEN")
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    channel = os.environ.get("SLACK_CHANNEL_ID")
    if channel:
        config["slack_channel"] = channel

    return config
