"""Send rendered messages to the messaging platform.

The Dispatcher holds no state of its own: it turns an event (plus, for
continuing events, a thread handle) into one or more platform calls and
hands back the handle of any thread it creates. Retries and backoff are the
platform client's business; anything it raises is terminal for the request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from prthread_core.errors import DispatchFailure

if TYPE_CHECKING:
    from prthread_core.events import OpenedEvent, TypedEvent
    from prthread_core.rendering import MessageRenderer

logger = logging.getLogger(__name__)


class MessagingClient(Protocol):
    def post_message(self, text: str) -> str:
        """Post a top-level message and return its thread handle."""

    def post_threaded_message(self, thread_handle: str, text: str) -> None:
        """Post a reply under an existing thread."""


class Dispatcher:
    def __init__(self, client: MessagingClient, renderer: MessageRenderer):
        self._client = client
        self._renderer = renderer

    def open_thread(self, event: OpenedEvent) -> str:
        """Post the opening message and its follow-ups; return the new thread handle.

        Follow-ups (reviewers requested at open time) are part of the same
        operation: if any of them fails the handle is withheld, so the caller
        never binds a half-announced thread.
        """
        key = event.review_unit.correlation_key
        try:
            handle = self._client.post_message(self._renderer.render_opening(event))
        except Exception as e:
            raise DispatchFailure(f"Could not open thread for {key}: {e}", correlation_key=key) from e

        for text in self._renderer.render_followups(event):
            try:
                self._client.post_threaded_message(handle, text)
            except Exception as e:
                raise DispatchFailure(
                    f"Opened thread {handle} for {key} but a follow-up failed: {e}", correlation_key=key
                ) from e

        logger.debug("Opened thread %s for %s", handle, key)
        return handle

    def reply_in_thread(self, thread_handle: str, event: TypedEvent) -> None:
        key = event.review_unit.correlation_key
        text = self._renderer.render_reply(event)
        try:
            self._client.post_threaded_message(thread_handle, text)
        except Exception as e:
            raise DispatchFailure(
                f"Could not reply in thread {thread_handle} for {key}: {e}", correlation_key=key
            ) from e
