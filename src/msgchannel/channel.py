""" The :class:`MessageChannel` multiplexes any number of named channels over
    the single message stream of one message target.
"""

from . import config
from . import envelope
from . import target as _target
from .dispatch import Dispatcher
from .errors import DisposedError, UnregisteredChannelError
from .registry import Registry, check_channel


class MessageChannel:
    """ Bind named channels to a message target. The *target* is any object
        with callable ``subscribe(event, listener)``, ``send(message)`` and
        ``unsubscribe(event, listener)`` attributes; see
        :class:`msgchannel.target.MessageTarget`. An
        :class:`msgchannel.errors.InvalidTargetError` is raised if any of
        the three is missing.

        Constructing an instance subscribes a listener on the target, which
        in turn holds references to every registered handler. Neither the
        instance nor its handlers will be released until :func:`dispose` is
        called, or the target itself is released. A :class:`MessageChannel`
        can also be used as a context manager, which disposes on exit.

        *on_error* receives exceptions raised by handlers during dispatch,
        see :class:`msgchannel.dispatch.Dispatcher`. *event* overrides the
        event name the listener is subscribed under, which otherwise comes
        from :data:`msgchannel.config.event`.
    """

    def __init__(self, target, on_error=None, event=None):

        _target.validate(target)

        if event is None:
            event = config.event

        self.target = target
        self.event = event
        self.registry = Registry()
        self.dispatcher = Dispatcher(self.registry, on_error)
        self._disposed = False

        self.target.subscribe(self.event, self.dispatcher)


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.dispose()


    def __repr__(self):

        if self._disposed:
            state = 'disposed'
        else:
            state = '%d channels' % (len(self.registry),)

        return '<%s on %r, %s>' % (type(self).__name__, self.target, state)


    @property
    def disposed(self):
        """ True once :func:`dispose` has been called.
        """

        return self._disposed


    def channels(self):
        """ Return the names of the channels with registered handlers.
        """

        self._check_disposed()
        return self.registry.channels()


    def handlers(self, channel):
        """ Return a tuple of the handlers registered for *channel*, in the
            order they will be invoked.
        """

        self._check_disposed()
        check_channel(channel)
        return self.registry.snapshot(channel)


    def on(self, channel, handler, weak=False):
        """ Register *handler* to be called with the payload of every message
            that arrives on *channel*. Registering the same handler twice for
            one channel has no additional effect; a bound method counts as
            the same handler if it binds the same function to the same
            instance.

            By default the handler is kept alive until it is removed with
            :func:`off` or :func:`remove_all_handlers`, or the instance is
            disposed. If *weak* is True only a weak reference is kept, and
            the handler is quietly dropped once nothing else refers to it;
            note that a lambda registered this way will be dropped
            immediately.
        """

        self._check_disposed()
        self.registry.register(channel, handler, weak)


    def off(self, channel, handler):
        """ Remove *handler* from *channel*. Removing a handler that is not
            registered does nothing.
        """

        self._check_disposed()
        self.registry.deregister(channel, handler)


    def remove_all_handlers(self, channel):
        """ Remove every handler registered for *channel*.
        """

        self._check_disposed()
        self.registry.clear(channel)


    def emit(self, channel, payload=None):
        """ Send *payload* on *channel* via the message target. The call
            returns as soon as the target accepts the message; there is no
            acknowledgement of delivery.

            This instance must have at least one handler registered for
            *channel*, otherwise an
            :class:`msgchannel.errors.UnregisteredChannelError` is raised.
        """

        self._check_disposed()
        check_channel(channel)

        if channel in self.registry:
            pass
        else:
            raise UnregisteredChannelError('channel not registered: ' + repr(channel))

        message = envelope.encode(channel, payload)
        self.target.send(message)


    def dispose(self):
        """ Unsubscribe from the message target and release every handler.
            Failing to dispose of an instance leaks both the instance and its
            handlers for as long as the message target is alive. Calling
            :func:`dispose` more than once is harmless; any other method
            called afterwards raises :class:`msgchannel.errors.DisposedError`.
        """

        with self.registry.lock:
            if self._disposed:
                return
            self._disposed = True

        try:
            self.target.unsubscribe(self.event, self.dispatcher)
        finally:
            self.registry.clear_all()


    def _check_disposed(self):

        if self._disposed:
            raise DisposedError('message channel has been disposed')


# end of class MessageChannel


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
