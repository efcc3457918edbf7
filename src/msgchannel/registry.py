""" The channel registry maps channel names to the ordered sequence of
    handlers registered for that channel. All mutation goes through the
    :class:`Registry` methods, which share one re-entrant lock with the
    dispatch snapshot; a handler is free to call back into the registry
    while it is being invoked.
"""

import threading

from . import weakref
from .errors import InvalidChannelError, InvalidHandlerError


def check_channel(channel):
    """ Raise :class:`InvalidChannelError` unless *channel* is a non-empty
        string.
    """

    if isinstance(channel, str) and channel != '':
        pass
    else:
        raise InvalidChannelError('expected a non-empty channel name, got ' + repr(channel))


def check_handler(handler):
    """ Raise :class:`InvalidHandlerError` unless *handler* is callable.
    """

    if callable(handler):
        pass
    else:
        raise InvalidHandlerError('expected a callable handler, got ' + repr(handler))



class Registry:
    """ Channel name to handler mapping. Handlers are held via the
        references in :mod:`msgchannel.weakref`: strong by default, weak
        if requested at registration time. A dead weak reference is pruned
        the next time its channel is read, and a channel with no live
        handlers is removed outright.
    """

    def __init__(self):

        self.lock = threading.RLock()
        self._channels = dict()


    def __contains__(self, channel):
        """ True if *channel* has at least one live handler.
        """

        with self.lock:
            references = self._prune(channel)
            return bool(references)


    def __len__(self):

        with self.lock:
            return len(self.channels())


    def channels(self):
        """ Return a list of the channel names with at least one live
            handler, in the order the channels were first registered.
        """

        with self.lock:
            names = tuple(self._channels.keys())
            return [name for name in names if self._prune(name)]


    def register(self, channel, handler, weak=False):
        """ Append *handler* to the sequence for *channel*. Registering a
            handler that is already present is a silent no-op; the existing
            registration, and its position, is retained.
        """

        check_channel(channel)
        check_handler(handler)

        if weak:
            try:
                reference = weakref.ref(handler)
            except TypeError:
                raise InvalidHandlerError('cannot hold a weak reference to ' + repr(handler))
        else:
            reference = weakref.strong(handler)

        with self.lock:
            try:
                references = self._channels[channel]
            except KeyError:
                references = list()
                self._channels[channel] = references

            if self._find(references, handler) is not None:
                return

            references.append(reference)


    def deregister(self, channel, handler):
        """ Remove *handler* from the sequence for *channel*. Nothing happens
            if the channel or the handler is not registered.
        """

        check_channel(channel)
        check_handler(handler)

        with self.lock:
            try:
                references = self._channels[channel]
            except KeyError:
                return

            index = self._find(references, handler)
            if index is None:
                return

            del references[index]


    def clear(self, channel):
        """ Remove every handler for *channel*. The channel does not need to
            be registered.
        """

        check_channel(channel)

        with self.lock:
            self._channels.pop(channel, None)


    def clear_all(self):
        """ Drop every handler reference for every channel.
        """

        with self.lock:
            self._channels.clear()


    def snapshot(self, channel):
        """ Return a tuple of the live handlers currently registered for
            *channel*, in registration order. Later changes to the registry
            do not affect the returned tuple.
        """

        handlers = list()

        with self.lock:
            references = self._prune(channel)
            if references is None:
                return tuple()

            for reference in references:
                handler = reference()
                if handler is not None:
                    handlers.append(handler)

        return tuple(handlers)


    def _find(self, references, handler):
        """ Return the index of *handler* in *references*, or None.
        """

        for index, reference in enumerate(references):
            registered = reference()
            if registered is None:
                continue

            if weakref.same(registered, handler):
                return index

        return None


    def _prune(self, channel):
        """ Discard dead references for *channel*, and the channel itself if
            nothing is left. Return the remaining references, or None if the
            channel is not registered. The caller must hold the lock.
        """

        try:
            references = self._channels[channel]
        except (KeyError, TypeError):
            # An unhashable name cannot have been registered.
            return None

        references[:] = [reference for reference in references if reference() is not None]

        if len(references) == 0:
            del self._channels[channel]
            return None

        return references


# end of class Registry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
