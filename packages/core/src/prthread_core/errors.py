"""Failure taxonomy for the correlation core.

Each error carries the HTTP status the webhook responds with, so the
orchestrator can map any failure to a response without a lookup table.
"""

from __future__ import annotations

from typing import Optional


class ThreadingError(Exception):
    """Base prthread error."""

    status_code: int = 500

    def __init__(self, message: str, *, correlation_key: Optional[str] = None) -> None:
        super().__init__(message)
        self.correlation_key = correlation_key


class MalformedEnvelope(ThreadingError):
    """Body is not a JSON object, or its discriminator is missing or not a string."""

    status_code = 400


class SchemaMismatch(ThreadingError):
    """Discriminator was recognised but the payload does not decode into that event."""

    status_code = 400


class UnrecognizedAction(ThreadingError):
    """Discriminator names an action prthread does not handle.

    Not a failure: the orchestrator answers 200 and does nothing.
    """

    status_code = 200

    def __init__(self, action: str) -> None:
        super().__init__(f"Unrecognized action: {action!r}")
        self.action = action


class ThreadNotFound(ThreadingError):
    """A continuing event arrived for a pull request with no stored thread."""

    status_code = 500


class DispatchFailure(ThreadingError):
    """The messaging platform rejected or failed to deliver a message."""

    status_code = 500


class PersistenceFailure(ThreadingError):
    """The correlation store could not be read or written."""

    status_code = 500
