"""SQLiteStore — local file-based durable store for thread bindings.

Why SQLite as the default store:
- Batteries included: ships with Python, no extra infrastructure to run
  next to a single webhook receiver.
- Native upsert: ``INSERT ... ON CONFLICT DO UPDATE`` gives the
  unconditional, key-addressed write the correlation core relies on.
- Survives restarts, which is the whole point of a correlation record.

Schema:
  thread_bindings — one row per pull request, primary-keyed by correlation key.
"""

from __future__ import annotations

import logging
import sqlite3
import threading

from prthread_store.base import BaseStore
from prthread_store.models import ThreadBinding

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS thread_bindings (
    correlation_key TEXT PRIMARY KEY,
    thread_handle   TEXT NOT NULL,
    created_at      TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_thread_bindings_created ON thread_bindings (created_at);
"""


class SQLiteStore(BaseStore):
    """Stores thread bindings in a local SQLite database file.

    The database file path defaults to `.prthread.db` in the current working
    directory. Configure via .prthread.yml: `store_path: /path/to/prthread.db`.

    The server calls into the store from FastAPI's worker threads, so the
    connection is opened with ``check_same_thread=False`` and every statement
    runs under a single lock.
    """

    def __init__(self, db_path: str = ".prthread.db"):
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def get(self, correlation_key: str) -> ThreadBinding | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM thread_bindings WHERE correlation_key=?",
                (correlation_key,),
            ).fetchone()
        return self._row_to_binding(row) if row is not None else None

    def put(self, binding: ThreadBinding) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO thread_bindings (correlation_key, thread_handle, created_at)
                VALUES (?, ?, ?)
                ON CONFLICT(correlation_key) DO UPDATE SET
                  thread_handle = excluded.thread_handle,
                  created_at    = excluded.created_at
                """,
                (binding.correlation_key, binding.thread_handle, binding.created_at),
            )
            self._conn.commit()
        logger.debug("Stored binding %s -> %s", binding.correlation_key, binding.thread_handle)

    def list_bindings(self, prefix: str | None = None) -> list[ThreadBinding]:
        with self._lock:
            if prefix is not None:
                # substr() rather than LIKE so '%' and '_' in repo names match literally.
                rows = self._conn.execute(
                    "SELECT * FROM thread_bindings WHERE substr(correlation_key, 1, ?) = ? ORDER BY created_at",
                    (len(prefix), prefix),
                ).fetchall()
            else:
                rows = self._conn.execute("SELECT * FROM thread_bindings ORDER BY created_at").fetchall()

        return [self._row_to_binding(r) for r in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @staticmethod
    def _row_to_binding(row: sqlite3.Row) -> ThreadBinding:
        return ThreadBinding(
            correlation_key=row["correlation_key"],
            thread_handle=row["thread_handle"],
            created_at=row["created_at"],
        )
