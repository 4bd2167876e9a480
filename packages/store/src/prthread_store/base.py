"""Abstract store interface.

Any binding backend (SQLite, in-memory, DynamoDB, Postgres) implements this
interface. The core depends on BaseStore, not on a concrete backend, so
backends are swappable without touching the correlation logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prthread_store.models import ThreadBinding


class BaseStore(ABC):
    """Pluggable persistence layer for thread bindings.

    Implementations are shared by every in-flight webhook request, so get()
    and put() must be safe to call concurrently from multiple threads.
    """

    @abstractmethod
    def get(self, correlation_key: str) -> ThreadBinding | None:
        """Return the binding for a correlation key, or None if unbound."""

    @abstractmethod
    def put(self, binding: ThreadBinding) -> None:
        """Unconditionally upsert a binding keyed by its correlation key.

        A second put() for the same key replaces the first (last writer wins).
        Raises on backend failure; callers decide how to report it.
        """

    @abstractmethod
    def list_bindings(self, prefix: str | None = None) -> list[ThreadBinding]:
        """Return bindings ordered by creation time, optionally filtered by key prefix."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional — subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
