""" Two channel instances in one process, talking through a ZeroMQ broker.
    The same ZmqTarget arguments work from separate processes as long as
    they can reach the broker ports.
"""

import threading
import time

import msgchannel
from msgchannel.transport import zmq


def main():

    broker = zmq.Broker()
    print('broker: ' + repr(broker))

    listener_target = zmq.ZmqTarget.for_broker(broker)
    speaker_target = zmq.ZmqTarget.for_broker(broker)

    listener = msgchannel.MessageChannel(listener_target)
    speaker = msgchannel.MessageChannel(speaker_target)

    heard = threading.Event()

    def greeted(payload):
        print('heard: ' + repr(payload))
        heard.set()

    listener.on('greet', greeted)

    # emit() is only permitted on channels with a local handler.

    speaker.on('greet', lambda payload: None)

    # Give the PUB/SUB connections a moment to come up; anything sent
    # before then is dropped.

    while heard.is_set() == False:
        speaker.emit('greet', {'text': 'hello', 'time': time.time()})
        heard.wait(0.2)

    listener.dispose()
    speaker.dispose()
    listener_target.close()
    speaker_target.close()
    broker.close()


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
