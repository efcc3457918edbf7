import threading
import time

import pytest

import msgchannel

zmq = pytest.importorskip('msgchannel.transport.zmq')


def emit_until(channel, name, payload, event, timeout=5):
    """ PUB/SUB connections take a moment to establish, and anything sent
        before then is silently dropped. Repeat the emit until it arrives.
    """

    expiration = time.time() + timeout

    while time.time() < expiration:
        channel.emit(name, payload)
        if event.wait(0.1):
            return True

    return False


def test_frames():
    frames = zmq.to_frames('bus', 'message', {'channel': 'greet', 'payload': 'hi'})

    assert frames[0] == b'bus.'
    assert frames[1] == zmq.VERSION
    assert frames[2] == b'message'

    decoded = zmq.from_frames(frames)
    assert decoded == ('message', {'channel': 'greet', 'payload': 'hi'})


def test_foreign_frames():
    assert zmq.from_frames([b'bus.']) is None
    assert zmq.from_frames([b'bus.', b'999', b'message', b'{}']) is None
    assert zmq.from_frames([b'bus.', zmq.VERSION, b'message', b'{not json']) is None


def test_fixed_port_in_use(broker):

    with pytest.raises(msgchannel.errors.TransportPortError):
        zmq.Broker(frontend=broker.frontend)


def test_end_to_end(broker):
    first_target = zmq.ZmqTarget.for_broker(broker)
    second_target = zmq.ZmqTarget.for_broker(broker)

    first = msgchannel.MessageChannel(first_target)
    second = msgchannel.MessageChannel(second_target)

    received = list()
    arrived = threading.Event()

    def handler(payload):
        received.append(payload)
        arrived.set()

    first.on('greet', handler)
    second.on('greet', lambda payload: None)

    assert emit_until(second, 'greet', 'hi', arrived)
    assert received[0] == 'hi'

    first.dispose()
    second.dispose()
    first_target.close()
    second_target.close()


def test_topics_are_separate(broker):
    sender_target = zmq.ZmqTarget.for_broker(broker, topic='one')
    other_target = zmq.ZmqTarget.for_broker(broker, topic='onetwo')
    local_target = zmq.ZmqTarget.for_broker(broker, topic='one')

    sender = msgchannel.MessageChannel(sender_target)
    other = msgchannel.MessageChannel(other_target)
    local = msgchannel.MessageChannel(local_target)

    other_calls = list()
    arrived = threading.Event()

    other.on('greet', other_calls.append)
    local.on('greet', lambda payload: arrived.set())
    sender.on('greet', lambda payload: None)

    assert emit_until(sender, 'greet', 'hi', arrived)
    assert other_calls == []

    for channel in (sender, other, local):
        channel.dispose()

    for target in (sender_target, other_target, local_target):
        target.close()


def test_closed_target_refuses_send(broker):
    target = zmq.ZmqTarget.for_broker(broker)
    target.close()
    target.close()

    with pytest.raises(msgchannel.errors.TransportError):
        target.send({'channel': 'greet', 'payload': None})


def test_listener_failure_printed(broker, capsys):
    target = zmq.ZmqTarget.for_broker(broker)
    received = list()

    def broken(message):
        raise RuntimeError('listener failure')

    target.subscribe('message', broken)
    target.subscribe('message', received.append)

    frames = zmq.to_frames(target.topic, 'message', {'channel': 'greet'})
    target._incoming(list(frames))
    target.close()

    assert received == [{'channel': 'greet'}]
    assert 'listener failure' in capsys.readouterr().out


def test_send_racing_close(broker):
    """ A close() that completes while send() waits for the PUB socket must
        still surface as a TransportError, not a ZeroMQ error.
    """

    target = zmq.ZmqTarget.for_broker(broker)
    raised = list()

    def send():
        try:
            target.send({'channel': 'greet', 'payload': None})
        except Exception as error:
            raised.append(error)

    # Hold the socket lock so the sender stalls after its first check,
    # then shut the target down the way close() does.

    target.pub_lock.acquire()
    sender = threading.Thread(target=send)
    sender.start()
    time.sleep(0.1)

    target.shutdown = True
    target.pub.close()
    target.pub_lock.release()

    sender.join(5)
    target.thread.join(5)
    zmq.bus._active.discard(target)

    assert len(raised) == 1
    assert isinstance(raised[0], msgchannel.errors.TransportError)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
