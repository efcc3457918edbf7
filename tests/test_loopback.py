import threading

import pytest

import msgchannel
from msgchannel.transport import LoopbackTarget


def test_synchronous_delivery(loopback, recorder):

    loopback.subscribe('message', recorder)
    loopback.send('raw')

    assert recorder.calls == ['raw']
    assert loopback.sent == 1


def test_subscribe_twice_delivers_once(loopback, recorder):

    loopback.subscribe('message', recorder)
    loopback.subscribe('message', recorder)
    loopback.send('raw')

    assert recorder.calls == ['raw']

    loopback.unsubscribe('message', recorder)
    loopback.unsubscribe('message', recorder)
    loopback.send('raw')

    assert recorder.calls == ['raw']
    assert loopback.listener_count() == 0


def test_other_events_not_delivered(loopback, recorder):

    loopback.subscribe('other', recorder)
    loopback.send('raw')

    assert recorder.calls == []
    assert loopback.deliver('injected', event='other') == 1
    assert recorder.calls == ['injected']


def test_listener_failure_printed(loopback, recorder, capsys):

    def broken(message):
        raise RuntimeError('listener failure')

    loopback.subscribe('message', broken)
    loopback.subscribe('message', recorder)
    loopback.send('raw')

    assert recorder.calls == ['raw']
    assert 'listener failure' in capsys.readouterr().out


def test_serialized_delivery_copies(recorder):
    target = LoopbackTarget(serialize=True)
    channel = msgchannel.MessageChannel(target)

    payload = {'values': [1, 2, 3]}
    channel.on('data', recorder)
    channel.emit('data', payload)

    assert recorder.calls == [payload]
    assert recorder.calls[0] is not payload

    with pytest.raises(TypeError):
        channel.emit('data', object())

    channel.dispose()
    target.close()


def test_threaded_delivery():
    target = LoopbackTarget(threaded=True)
    first = msgchannel.MessageChannel(target)
    second = msgchannel.MessageChannel(target)

    received = list()
    threads = list()
    arrived = threading.Event()

    def handler(payload):
        received.append(payload)
        threads.append(threading.current_thread())
        if len(received) == 3:
            arrived.set()

    first.on('greet', handler)
    second.on('greet', lambda payload: None)

    second.emit('greet', 1)
    second.emit('greet', 2)
    second.emit('greet', 3)

    assert arrived.wait(5)
    assert received == [1, 2, 3]
    assert threads[0] is target.thread

    first.dispose()
    second.dispose()
    target.close()

    with pytest.raises(msgchannel.errors.TransportError):
        target.send('late')


def test_close_drains_queue(recorder):
    target = LoopbackTarget(threaded=True)
    target.subscribe('message', recorder)

    for count in range(100):
        target.send(count)

    target.close()

    assert recorder.calls == list(range(100))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
