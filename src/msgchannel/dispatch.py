""" The dispatcher is the one listener a :class:`msgchannel.MessageChannel`
    subscribes on its message target. Each inbound message is decoded and
    fanned out to the handlers registered for its channel.
"""

import traceback

from . import envelope


def report(error, channel, payload, handler):
    """ Default sink for exceptions raised by handlers during dispatch. The
        traceback is printed and dispatch carries on with the next handler.
    """

    print(traceback.format_exc())



class Dispatcher:
    """ Callable listener bound to one :class:`msgchannel.registry.Registry`.
        The same instance must be handed to both the subscribe and the
        unsubscribe calls on the message target; a freshly bound method
        would not match the one originally subscribed.

        *on_error* is invoked as ``on_error(error, channel, payload, handler)``
        for each handler that raises; the default is :func:`report`.
    """

    def __init__(self, registry, on_error=None):

        self.registry = registry

        if on_error is None:
            on_error = report

        self.on_error = on_error


    def __call__(self, message):
        self.dispatch(message)


    def dispatch(self, message):
        """ Invoke every handler registered for the channel named in the
            inbound *message*, in registration order. Handlers registered or
            removed while this dispatch is running are not seen until the
            next message arrives. Returns the number of handlers invoked.
        """

        channel, payload = envelope.decode(message)

        if channel is None:
            return 0

        handlers = self.registry.snapshot(channel)

        for handler in handlers:
            try:
                handler(payload)
            except Exception as error:
                self._failed(error, channel, payload, handler)

        return len(handlers)


    def _failed(self, error, channel, payload, handler):

        try:
            self.on_error(error, channel, payload, handler)
        except Exception as secondary:
            report(secondary, channel, payload, handler)


# end of class Dispatcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
