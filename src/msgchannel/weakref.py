""" References to registered handlers. The registry never stores a handler
    directly, it stores a reference that must be called to recover the
    handler, the same way a :class:`weakref.ref` is used. A reference that
    returns None is dead and should be discarded.
"""

import types
import weakref


def ref(thing):
    """ Return a weak reference to the supplied argument, regardless of
        whether it is a simple object or a bound method.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        return weakref.ref(thing)
    else:
        return weakref.WeakMethod(thing)


def strong(thing):
    """ Return a reference that keeps the supplied argument alive until the
        reference itself is discarded.
    """

    return Strong(thing)


def same(first, second):
    """ Return True if the two handlers are the same handler. Every access
        to obj.method creates a new bound method object, so bound methods
        are the same if they bind the same function to the same instance.
        Nothing is compared by value.
    """

    if first is second:
        return True

    if isinstance(first, types.BuiltinMethodType) and isinstance(second, types.BuiltinMethodType):
        return first.__self__ is second.__self__ and first.__name__ == second.__name__

    try:
        first_func = first.__func__
        first_self = first.__self__
        second_func = second.__func__
        second_self = second.__self__
    except AttributeError:
        return False

    return first_func is second_func and first_self is second_self



class Strong:
    """ Callable wrapper with the same calling convention as a weak
        reference, but which holds a strong reference.
    """

    __slots__ = ('thing',)

    def __init__(self, thing):
        self.thing = thing


    def __call__(self):
        return self.thing


    def __repr__(self):
        return '<strong reference to %r>' % (self.thing,)


# end of class Strong


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
