"""ZeroMQ message target.

A :class:`Broker` forwards traffic between any number of :class:`ZmqTarget`
instances, in this process or others; each target publishes to the broker
frontend and subscribes to the broker backend.
"""

from .bus import Broker, ZmqTarget, shutdown
from .framing import VERSION, from_frames, to_frames
