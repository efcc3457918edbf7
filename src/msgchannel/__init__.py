""" Python implementation of msgchannel: named channels multiplexed over the
    single message stream of any transport that can subscribe, send, and
    unsubscribe.
"""

# Utility components.

from . import weakref
from . import config
from . import errors

# Building blocks of a MessageChannel.

from . import target
from . import envelope
from . import registry
from . import dispatch

# Primary public-facing interfaces.

from .channel import MessageChannel
from .target import MessageTarget
from .errors import (
    MessageChannelError,
    InvalidTargetError,
    InvalidChannelError,
    InvalidHandlerError,
    UnregisteredChannelError,
    DisposedError,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
