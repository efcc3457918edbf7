import pytest

import msgchannel
from msgchannel.transport import LoopbackTarget


class Recorder:
    """ Handler that remembers every payload it was invoked with.
    """

    def __init__(self):
        self.calls = list()

    def __call__(self, payload):
        self.calls.append(payload)

    def method(self, payload):
        self.calls.append(payload)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def loopback():
    target = LoopbackTarget()
    yield target
    target.close()


@pytest.fixture
def channel(loopback):
    instance = msgchannel.MessageChannel(loopback)
    yield instance
    instance.dispose()


@pytest.fixture
def broker():

    zmq = pytest.importorskip('msgchannel.transport.zmq')

    instance = zmq.Broker()
    yield instance
    instance.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
