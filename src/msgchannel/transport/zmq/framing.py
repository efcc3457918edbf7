"""ZMQ multipart framing for channel traffic.

    topic_with_trailing_dot, version, event, message_json

The trailing dot on the topic prevents prefix matches between buses with
similar names, since SUB filtering is by prefix.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import msgspec


VERSION = b"1"

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()


def topic_bytes(topic: str) -> bytes:
    return (topic + ".").encode()


def to_frames(topic: str, event: str, message: Any) -> Tuple[bytes, ...]:
    """Encode one outbound message."""

    return (topic_bytes(topic), VERSION, event.encode(), _encoder.encode(message))


def from_frames(parts: Sequence[bytes]) -> Optional[Tuple[str, Any]]:
    """Decode one inbound multipart message into ``(event, message)``.

    Returns None for anything that is not well-formed traffic of this
    protocol version; a shared broker may carry other producers' traffic.
    """

    if len(parts) != 4:
        return None

    their_version = parts[1]
    if their_version != VERSION:
        return None

    try:
        event = parts[2].decode()
        message = _decoder.decode(parts[3])
    except (UnicodeDecodeError, msgspec.DecodeError):
        return None

    return event, message
