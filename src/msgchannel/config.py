""" Run time defaults, read once from the environment at import. The module
    attributes can be reassigned afterwards; new instances pick up the
    current values.

    ``MSGCHANNEL_EVENT``
        Event name the dispatcher subscribes under, and the name the bundled
        transports deliver messages on. Default ``message``.

    ``MSGCHANNEL_TOPIC``
        ZeroMQ topic prefix shared by every participant on one bus.
        Default ``msgchannel``.

    ``MSGCHANNEL_ADDRESS``
        Address of the ZeroMQ broker. Default ``127.0.0.1``.

    ``MSGCHANNEL_PORTS``
        Range of ports, ``minimum:maximum``, tried in order when a broker
        is not given a fixed port. Default ``10139:13679``.
"""

import os


def _ports(value):

    try:
        minimum, maximum = value.split(':')
        minimum = int(minimum)
        maximum = int(maximum)
    except ValueError:
        raise ValueError('MSGCHANNEL_PORTS must be minimum:maximum, not ' + repr(value))

    if minimum > maximum:
        raise ValueError('MSGCHANNEL_PORTS minimum exceeds maximum: ' + repr(value))

    return minimum, maximum


event = os.environ.get('MSGCHANNEL_EVENT', 'message')
topic = os.environ.get('MSGCHANNEL_TOPIC', 'msgchannel')
address = os.environ.get('MSGCHANNEL_ADDRESS', '127.0.0.1')
minimum_port, maximum_port = _ports(os.environ.get('MSGCHANNEL_PORTS', '10139:13679'))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
