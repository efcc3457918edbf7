"""Message target contract.

This is the (small) contract a transport must satisfy to carry channel
traffic. It is checked structurally: any object with callable ``subscribe``,
``send`` and ``unsubscribe`` attributes is acceptable, whether or not it
derives from :class:`MessageTarget`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, List

from .errors import InvalidTargetError


CAPABILITIES = ("subscribe", "send", "unsubscribe")


class MessageTarget(ABC):
    """Minimal contract for a message target."""

    @abstractmethod
    def subscribe(self, event: str, listener: Callable[[Any], None]) -> None:
        """Invoke ``listener`` with each inbound message delivered on ``event``."""

    @abstractmethod
    def send(self, message: Any) -> None:
        """Hand ``message`` to the transport for asynchronous delivery."""

    @abstractmethod
    def unsubscribe(self, event: str, listener: Callable[[Any], None]) -> None:
        """Reverse a previous :meth:`subscribe` with the same arguments."""


def missing(target: Any) -> List[str]:
    """Return the names of the capabilities ``target`` does not provide."""

    absent = []
    for name in CAPABILITIES:
        if not callable(getattr(target, name, None)):
            absent.append(name)
    return absent


def validate(target: Any) -> None:
    """Raise :class:`InvalidTargetError` unless ``target`` is usable."""

    if target is None:
        raise InvalidTargetError("message target is required")

    absent = missing(target)
    if absent:
        raise InvalidTargetError(
            f"message target {type(target).__name__} lacks: {', '.join(absent)}"
        )
