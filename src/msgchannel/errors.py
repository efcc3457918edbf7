""" Exceptions raised by :mod:`msgchannel`. Every exception raised by the
    public interface derives from :class:`MessageChannelError`, and also
    from the closest built-in exception, so callers can catch either.
"""


class MessageChannelError(Exception):
    """ Base class for all msgchannel errors. """


class InvalidTargetError(MessageChannelError, TypeError):
    """ The supplied message target is missing one or more of the required
        subscribe/send/unsubscribe capabilities.
    """


class InvalidChannelError(MessageChannelError, ValueError):
    """ A channel name was absent, empty, or not a string. """


class InvalidHandlerError(MessageChannelError, TypeError):
    """ A handler was not callable. """


class UnregisteredChannelError(MessageChannelError, KeyError):
    """ :func:`MessageChannel.emit` was invoked for a channel with no local
        handlers registered.
    """

    def __str__(self):
        # KeyError.__str__ would repr() the message.
        return Exception.__str__(self)


class DisposedError(MessageChannelError, RuntimeError):
    """ The channel instance has already been disposed. """


# Reference transport errors.

class TransportError(MessageChannelError):
    """ Base class for errors raised by the bundled transports. """


class TransportPortError(TransportError):
    """ No suitable port could be bound. """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
