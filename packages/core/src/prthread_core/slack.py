from __future__ import annotations

import logging
from typing import Optional

from slack_sdk import WebClient
from slack_sdk.http_retry.builtin_handlers import RateLimitErrorRetryHandler

logger = logging.getLogger(__name__)

_RATE_LIMIT_RETRIES = 2


class SlackClient:
    """MessagingClient backed by Slack's chat.postMessage.

    The thread handle is the ``ts`` Slack assigns to the top-level message;
    replies pass it back as ``thread_ts``. Connection and rate-limit retries
    are handled by slack_sdk's retry handlers, so any SlackApiError that
    escapes here is final.

    Each call is bounded only by ``timeout`` (seconds, per HTTP request).
    No request deadline is passed down from the webhook, and a client that
    disconnects does not cancel a post already in flight.
    """

    def __init__(self, token: str, channel: str, timeout: int = 30, web_client: Optional[WebClient] = None):
        if web_client is None:
            web_client = WebClient(token=token, timeout=timeout)
            web_client.retry_handlers.append(RateLimitErrorRetryHandler(max_retry_count=_RATE_LIMIT_RETRIES))
        self._client = web_client
        self._channel = channel

    def post_message(self, text: str) -> str:
        response = self._client.chat_postMessage(channel=self._channel, text=text, unfurl_links=False)
        return response["ts"]

    def post_threaded_message(self, thread_handle: str, text: str) -> None:
        self._client.chat_postMessage(channel=self._channel, text=text, thread_ts=thread_handle, unfurl_links=False)
        logger.debug("Replied in thread %s", thread_handle)
