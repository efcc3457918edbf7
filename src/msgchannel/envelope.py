"""Envelope encoding.

An envelope pairs a channel name with its payload::

    {"channel": "<string>", "payload": <any>}

It exists only between :func:`encode` and the transport's ``send``, and
between the transport's delivery and :func:`decode`. Serializing the
envelope, if the transport needs to, is the transport's business.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

CHANNEL = "channel"
PAYLOAD = "payload"


def encode(channel: str, payload: Any = None) -> Dict[str, Any]:
    return {CHANNEL: channel, PAYLOAD: payload}


def decode(message: Any) -> Tuple[Optional[str], Any]:
    """Return ``(channel, payload)`` for an inbound message.

    The message may be the envelope itself, or an event-like object that
    carries the envelope in its ``data`` attribute. Traffic that is not an
    envelope decodes to ``(None, None)``; a shared transport may carry
    messages from unrelated producers, and those are not errors.
    """

    if not isinstance(message, Mapping):
        message = getattr(message, "data", None)
        if not isinstance(message, Mapping):
            return None, None

    channel = message.get(CHANNEL)
    if not isinstance(channel, str) or channel == "":
        return None, None

    return channel, message.get(PAYLOAD)
