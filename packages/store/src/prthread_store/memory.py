"""In-process store — bindings live only as long as the server process.

Useful for tests and for trying prthread out against a scratch channel.
Every restart forgets every thread, so continuation events for pull requests
opened before the restart will fail to resolve.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from prthread_store.base import BaseStore

if TYPE_CHECKING:
    from prthread_store.models import ThreadBinding


class MemoryStore(BaseStore):
    """Dict-backed store guarded by a lock."""

    def __init__(self):
        self._bindings: dict[str, ThreadBinding] = {}
        self._lock = threading.Lock()

    def get(self, correlation_key: str) -> ThreadBinding | None:
        with self._lock:
            return self._bindings.get(correlation_key)

    def put(self, binding: ThreadBinding) -> None:
        with self._lock:
            self._bindings[binding.correlation_key] = binding

    def list_bindings(self, prefix: str | None = None) -> list[ThreadBinding]:
        with self._lock:
            bindings = list(self._bindings.values())
        if prefix is not None:
            bindings = [b for b in bindings if b.correlation_key.startswith(prefix)]
        return sorted(bindings, key=lambda b: b.created_at)
