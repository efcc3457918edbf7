"""In-process message target.

Every message handed to :meth:`LoopbackTarget.send` is delivered to every
listener subscribed under the configured event name, including listeners
belonging to the sender. Any number of :class:`msgchannel.MessageChannel`
instances sharing one :class:`LoopbackTarget` form a bus.
"""

from __future__ import annotations

import queue
import threading
import traceback
from typing import Any, Callable, Dict, List, Optional

import msgspec

from .. import config
from ..errors import TransportError
from ..target import MessageTarget

Listener = Callable[[Any], None]


class LoopbackTarget(MessageTarget):
    """Deliver sent messages back to local listeners.

    With ``threaded=False`` (the default) :meth:`send` delivers before it
    returns. With ``threaded=True`` messages are queued and delivered in
    order by a background thread, the way a real transport hands them over
    from another execution context; call :meth:`close` when finished.

    With ``serialize=True`` each message is encoded and decoded with
    msgspec JSON, so listeners receive a copy, and a message that
    cannot be encoded fails at :meth:`send`.
    """

    def __init__(self, threaded: bool = False, serialize: bool = False, event: Optional[str] = None):
        self.event = config.event if event is None else event
        self.serialize = serialize
        self.sent = 0

        self._listeners: Dict[str, List[Listener]] = {}
        self._lock = threading.Lock()

        self._queue: Optional[queue.SimpleQueue] = None
        self.thread: Optional[threading.Thread] = None
        self.shutdown = False

        if threaded:
            self._queue = queue.SimpleQueue()
            self.thread = threading.Thread(target=self.run, daemon=True)
            self.thread.start()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.event!r}, {self.listener_count()} listeners>"

    def listener_count(self, event: Optional[str] = None) -> int:
        event = self.event if event is None else event
        with self._lock:
            return len(self._listeners.get(event, ()))

    def subscribe(self, event: str, listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.setdefault(event, [])
            if listener not in listeners:
                listeners.append(listener)

    def unsubscribe(self, event: str, listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(event)
            if not listeners:
                return
            try:
                listeners.remove(listener)
            except ValueError:
                return
            if not listeners:
                del self._listeners[event]

    def send(self, message: Any) -> None:
        if self.shutdown:
            raise TransportError("loopback target is closed")

        if self.serialize:
            message = _decoder.decode(_encoder.encode(message))

        self.sent += 1

        if self._queue is None:
            self.deliver(message)
        else:
            self._queue.put(message)

    def deliver(self, message: Any, event: Optional[str] = None) -> int:
        """Invoke the listeners for ``event`` with ``message``.

        This is also how tests inject raw traffic that did not come through
        :meth:`send`. Returns the number of listeners invoked.
        """

        event = self.event if event is None else event
        with self._lock:
            listeners = tuple(self._listeners.get(event, ()))

        for listener in listeners:
            try:
                listener(message)
            except Exception:
                print(traceback.format_exc())

        return len(listeners)

    def run(self) -> None:
        while True:
            message = self._queue.get()
            if message is _STOP:
                break
            self.deliver(message)

    def close(self, timeout: Optional[float] = None) -> None:
        if self.shutdown:
            return
        self.shutdown = True
        if self.thread is not None:
            self._queue.put(_STOP)
            self.thread.join(timeout)


_STOP = object()
_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()
