"""Turn a raw webhook body into a typed event.

Two steps, both side-effect free:
    decode_envelope() → bytes to a JSON object
    classify()        → read the discriminator, pick the variant, decode it fully
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from prthread_core.errors import MalformedEnvelope, SchemaMismatch, UnrecognizedAction
from prthread_core.events import ClosedEvent, CommentCreatedEvent, OpenedEvent, ReviewRequestedEvent, TypedEvent

DEFAULT_DISCRIMINATOR = "action"

_VARIANTS: dict[str, type[TypedEvent]] = {
    variant.action_name: variant for variant in (OpenedEvent, ReviewRequestedEvent, CommentCreatedEvent, ClosedEvent)
}


def decode_envelope(body: bytes) -> dict[str, Any]:
    """Parse a request body into a JSON object."""
    try:
        envelope = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise MalformedEnvelope(f"Request body is not valid JSON: {e}") from e
    if not isinstance(envelope, dict):
        raise MalformedEnvelope(f"Expected a JSON object, got {type(envelope).__name__}")
    return envelope


def classify(envelope: dict[str, Any], discriminator: str = DEFAULT_DISCRIMINATOR) -> TypedEvent:
    """Select and decode the event variant named by ``envelope[discriminator]``.

    Raises UnrecognizedAction for actions outside the four handled ones;
    callers are expected to treat that as a successful no-op.
    """
    action = envelope.get(discriminator)
    if action is None:
        raise MalformedEnvelope(f"Envelope has no {discriminator!r} field")
    if not isinstance(action, str):
        raise MalformedEnvelope(f"Envelope field {discriminator!r} must be a string, got {type(action).__name__}")

    variant = _VARIANTS.get(action)
    if variant is None:
        raise UnrecognizedAction(action)

    try:
        return variant.model_validate(envelope)
    except ValidationError as e:
        raise SchemaMismatch(f"Payload for action {action!r} does not match {variant.__name__}: {e}") from e
