"""Correlation data models.

Decoupled from prthread_core so the store layer can be used independently
and prthread_core has no knowledge of how bindings are persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class ThreadBinding:
    """Durable link between a pull request and the Slack thread it lives in.

    ``thread_handle`` is the platform-issued token (a Slack message ``ts``).
    It is stored and replayed verbatim, never parsed or rebuilt.
    """

    correlation_key: str
    thread_handle: str
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())  # ISO-8601 UTC
