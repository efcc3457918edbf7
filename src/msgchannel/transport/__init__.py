"""Reference message targets.

:mod:`msgchannel.transport.loopback` is an in-process bus, and
:mod:`msgchannel.transport.zmq` a ZeroMQ PUB/SUB bus spanning processes.
The ZeroMQ module is not imported here; import it explicitly.
"""

from ..errors import TransportError, TransportPortError
from . import loopback
from .loopback import LoopbackTarget
