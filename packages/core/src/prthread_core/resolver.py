"""Decide whether an event opens a Slack thread or continues one."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from prthread_core.errors import PersistenceFailure, ThreadNotFound

if TYPE_CHECKING:
    from prthread_core.events import TypedEvent
    from prthread_store.base import BaseStore

logger = logging.getLogger(__name__)


class ThreadRole(str, Enum):
    OPENING = "opening"
    CONTINUING = "continuing"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one event.

    ``thread_handle`` is set for continuing events and always None for
    opening ones: the handle does not exist until the thread is posted.
    """

    role: ThreadRole
    correlation_key: str
    thread_handle: Optional[str] = None

    @property
    def is_opening(self) -> bool:
        return self.role is ThreadRole.OPENING


class ThreadResolver:
    """Classify events as opening/continuing and look up existing threads.

    Read-only with respect to the store: bindings are written by the
    orchestrator once the opening message has actually been sent.
    """

    def __init__(self, store: BaseStore):
        self._store = store

    def resolve(self, event: TypedEvent) -> Resolution:
        key = event.review_unit.correlation_key

        if event.opens_thread:
            return Resolution(ThreadRole.OPENING, key)

        try:
            binding = self._store.get(key)
        except Exception as e:
            raise PersistenceFailure(
                f"Could not read binding for {key} ({type(e).__name__}: {e})", correlation_key=key
            ) from e

        # No implicit thread creation on a miss: the Opened event was lost or
        # predates this deployment, and `prthread backfill` is the repair path.
        if binding is None:
            raise ThreadNotFound(f"No thread is bound to {key}", correlation_key=key)

        logger.debug("Resolved %s to thread %s", key, binding.thread_handle)
        return Resolution(ThreadRole.CONTINUING, key, binding.thread_handle)
