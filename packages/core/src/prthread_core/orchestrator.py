"""Per-request state machine tying the correlation core together.

    Classifying → Resolving → Dispatching → Persisting → Done
                          ↘ (any stage) Failed

Every collaborator is injected; the orchestrator owns none of their
lifecycles. A failure stops the run where it happened; nothing already
sent to Slack is rolled back and nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from prthread_core.classifier import DEFAULT_DISCRIMINATOR, classify, decode_envelope
from prthread_core.errors import PersistenceFailure, ThreadingError, UnrecognizedAction
from prthread_core.resolver import ThreadResolver
from prthread_store.models import ThreadBinding

if TYPE_CHECKING:
    from prthread_core.dispatcher import Dispatcher
    from prthread_core.events import TypedEvent
    from prthread_store.base import BaseStore

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Webhook done."

_STATUS_MESSAGES = {400: "Bad Request", 500: "Internal Server Error"}


class Stage(str, Enum):
    CLASSIFYING = "classifying"
    RESOLVING = "resolving"
    DISPATCHING = "dispatching"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class WebhookResult:
    """What the transport sends back: a status code and a JSON body.

    ``failed_stage`` and ``error`` are set only when the run ended in Failed.
    """

    status_code: int
    body: dict[str, Any]
    stage: Stage
    failed_stage: Optional[Stage] = None
    error: Optional[ThreadingError] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.stage is Stage.DONE


class WebhookOrchestrator:
    def __init__(self, store: BaseStore, dispatcher: Dispatcher, discriminator: str = DEFAULT_DISCRIMINATOR):
        self._store = store
        self._dispatcher = dispatcher
        self._resolver = ThreadResolver(store)
        self._discriminator = discriminator

    def handle(self, body: bytes) -> WebhookResult:
        """Run one raw webhook delivery through the full state machine."""
        try:
            event = classify(decode_envelope(body), self._discriminator)
        except UnrecognizedAction as e:
            logger.info("Ignoring webhook with unhandled action %r", e.action)
            return self._done()
        except ThreadingError as e:
            return self._failed(Stage.CLASSIFYING, e)

        return self.handle_event(event)

    def handle_event(self, event: TypedEvent) -> WebhookResult:
        """Run an already-classified event from Resolving onwards."""
        stage = Stage.RESOLVING
        try:
            resolution = self._resolver.resolve(event)

            stage = Stage.DISPATCHING
            logger.debug("%s event for %s: %s", resolution.role.value, resolution.correlation_key, stage.value)
            if not resolution.is_opening:
                self._dispatcher.reply_in_thread(resolution.thread_handle, event)
                return self._done()

            handle = self._dispatcher.open_thread(event)

            stage = Stage.PERSISTING
            self._persist(ThreadBinding(correlation_key=resolution.correlation_key, thread_handle=handle))
        except ThreadingError as e:
            return self._failed(stage, e)

        return self._done()

    def _persist(self, binding: ThreadBinding) -> None:
        try:
            self._store.put(binding)
        except Exception as e:
            # The thread is already live in Slack; without a binding every later
            # event for this pull request fails until `prthread bind` repairs it.
            raise PersistenceFailure(
                f"Thread {binding.thread_handle} was posted but binding {binding.correlation_key} "
                f"could not be saved ({type(e).__name__}: {e})",
                correlation_key=binding.correlation_key,
            ) from e

    @staticmethod
    def _done() -> WebhookResult:
        return WebhookResult(status_code=200, body={"message": SUCCESS_MESSAGE}, stage=Stage.DONE)

    @staticmethod
    def _failed(stage: Stage, error: ThreadingError) -> WebhookResult:
        log = logger.warning if error.status_code < 500 else logger.error
        log("Webhook failed while %s: %s: %s", stage.value, type(error).__name__, error)
        return WebhookResult(
            status_code=error.status_code,
            body={"message": _STATUS_MESSAGES.get(error.status_code, "Error")},
            stage=Stage.FAILED,
            failed_stage=stage,
            error=error,
        )
