"""ZeroMQ publish/subscribe message target."""

from __future__ import annotations

import atexit
import threading
import traceback
from typing import Any, Callable, Dict, List, Optional, Set

import zmq

from ... import config
from ...errors import TransportError, TransportPortError
from ...target import MessageTarget
from .framing import from_frames, to_frames, topic_bytes

zmq_context = zmq.Context()

Listener = Callable[[Any], None]


def _bind(socket: zmq.Socket, interface: str, port: Optional[int], avoid: Set[int]) -> int:
    """Bind ``socket`` to ``port``, or to the first available port in the
    configured range if ``port`` is None. Return the bound port.
    """

    if port is not None:
        port = int(port)
        try:
            socket.bind(f"tcp://{interface}:{port}")
        except zmq.ZMQError as exc:
            raise TransportPortError(f"port already in use: {port}") from exc
        return port

    minimum = config.minimum_port
    maximum = config.maximum_port

    for trial in range(minimum, maximum + 1):
        if trial in avoid:
            continue
        try:
            socket.bind(f"tcp://{interface}:{trial}")
        except zmq.ZMQError:
            # Assume this port is in use.
            continue
        return trial

    raise TransportPortError(f"no ports available in range {minimum}:{maximum}")


class Broker:
    """XSUB/XPUB forwarder.

    Publishers connect to :attr:`frontend`, subscribers to :attr:`backend`.
    Subscription requests travel upstream from the backend to the frontend
    so that publishers only send what someone has asked for. Ports are
    picked from the configured range unless given; ``avoid`` enumerates
    ports that should not be picked automatically.
    """

    def __init__(
        self,
        frontend: Optional[int] = None,
        backend: Optional[int] = None,
        interface: Optional[str] = None,
        avoid: Optional[Set[int]] = None,
    ):
        avoid = set(avoid or ())
        self.interface = config.address if interface is None else interface

        self.xsub = zmq_context.socket(zmq.XSUB)
        self.xsub.setsockopt(zmq.LINGER, 0)
        self.xpub = zmq_context.socket(zmq.XPUB)
        self.xpub.setsockopt(zmq.LINGER, 0)

        try:
            self.frontend = _bind(self.xsub, self.interface, frontend, avoid)
            avoid.add(self.frontend)
            self.backend = _bind(self.xpub, self.interface, backend, avoid)
        except TransportError:
            self.xsub.close()
            self.xpub.close()
            raise

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()
        _active.add(self)

    def __enter__(self) -> "Broker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.interface}:{self.frontend}->{self.backend}>"

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.xsub, zmq.POLLIN)
        poller.register(self.xpub, zmq.POLLIN)

        try:
            while not self.shutdown:
                for active, _flag in poller.poll(100):
                    if active == self.xsub:
                        self.xpub.send_multipart(self.xsub.recv_multipart())
                    elif active == self.xpub:
                        self.xsub.send_multipart(self.xpub.recv_multipart())
        finally:
            self.xsub.close()
            self.xpub.close()

    def close(self, timeout: Optional[float] = 5) -> None:
        self.shutdown = True
        self.thread.join(timeout)
        _active.discard(self)


class ZmqTarget(MessageTarget):
    """Message target carried over a :class:`Broker`.

    Every :class:`ZmqTarget` connected to the same broker with the same
    ``topic`` sees every message any of them sends, including its own.
    Listeners are invoked from a background thread, one message at a time.
    :meth:`send` may be called from any thread.
    """

    def __init__(
        self,
        frontend: int,
        backend: int,
        address: Optional[str] = None,
        topic: Optional[str] = None,
        event: Optional[str] = None,
    ):
        self.address = config.address if address is None else address
        self.topic = config.topic if topic is None else topic
        self.event = config.event if event is None else event

        self._listeners: Dict[str, List[Listener]] = {}
        self._lock = threading.Lock()

        self.pub = zmq_context.socket(zmq.PUB)
        self.pub.setsockopt(zmq.LINGER, 0)
        self.pub.connect(f"tcp://{self.address}:{int(frontend)}")

        # The lock around the PUB socket is necessary in a multithreaded
        # application; otherwise, if two different threads both invoke
        # send_multipart(), the message parts can and will get mixed together.
        self.pub_lock = threading.Lock()

        # The SUB socket is handed to the background thread, and is not
        # touched from any other thread once that thread starts.
        self.sub = zmq_context.socket(zmq.SUB)
        self.sub.setsockopt(zmq.LINGER, 0)
        self.sub.setsockopt(zmq.SUBSCRIBE, topic_bytes(self.topic))
        self.sub.connect(f"tcp://{self.address}:{int(backend)}")

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()
        _active.add(self)

    @classmethod
    def for_broker(cls, broker: Broker, **kwargs) -> "ZmqTarget":
        """Connect to a broker running in this process."""
        address = broker.interface
        if address == "*":
            address = "127.0.0.1"
        kwargs.setdefault("address", address)
        return cls(broker.frontend, broker.backend, **kwargs)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.topic!r} via {self.address}>"

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
            raise TransportError("ZeroMQ target is closed")

        frames = to_frames(self.topic, self.event, message)

        with self.pub_lock:
            # close() may have run since the check above.
            if self.shutdown:
                raise TransportError("ZeroMQ target is closed")
            self.pub.send_multipart(frames)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.sub, zmq.POLLIN)

        try:
            while not self.shutdown:
                for active, _flag in poller.poll(100):
                    if active == self.sub:
                        self._incoming(self.sub.recv_multipart())
        finally:
            self.sub.close()

    def _incoming(self, parts: List[bytes]) -> None:
        decoded = from_frames(parts)
        if decoded is None:
            return

        event, message = decoded
        with self._lock:
            listeners = tuple(self._listeners.get(event, ()))

        for listener in listeners:
            try:
                listener(message)
            except Exception:
                print(traceback.format_exc())

    def close(self, timeout: Optional[float] = 5) -> None:
        if self.shutdown:
            return
        self.shutdown = True
        self.thread.join(timeout)
        with self.pub_lock:
            self.pub.close()
        _active.discard(self)


_active: Set[Any] = set()


def shutdown() -> None:
    """Close every broker and target that is still open."""
    for instance in list(_active):
        instance.close()


atexit.register(shutdown)
