"""
EventEmitter tests

Run: python -m pytest test/test_events.py -v

Property of Uncompromising Sensors LLC.
"""

import asyncio

import pytest

from apsync.events import EventEmitter


def test_listeners_called_in_registration_order():
    emitter = EventEmitter()
    calls = []
    emitter.on('tick', lambda value: calls.append(('first', value)))
    emitter.on('tick', lambda value: calls.append(('second', value)))

    assert emitter.emit('tick', 1) is True
    assert calls == [('first', 1), ('second', 1)]
    assert emitter.emit('unheard') is False


def test_once_and_off():
    emitter = EventEmitter()
    calls = []
    listener = lambda: calls.append('on')
    emitter.once('tick', lambda: calls.append('once'))
    emitter.on('tick', listener)

    emitter.emit('tick')
    emitter.off('tick', listener)
    emitter.emit('tick')

    assert calls == ['once', 'on']
    assert emitter.listenerCount('tick') == 0


def test_off_removes_once_listener_by_original():
    emitter = EventEmitter()
    calls = []
    listener = lambda: calls.append('once')
    emitter.once('tick', listener)
    emitter.off('tick', listener)

    emitter.emit('tick')
    assert calls == []


def test_failing_listener_does_not_block_others():
    emitter = EventEmitter()
    calls = []

    def broken():
        raise RuntimeError('boom')

    emitter.on('tick', broken)
    emitter.on('tick', lambda: calls.append('ok'))

    emitter.emit('tick')
    assert calls == ['ok']


def test_non_callable_listener_rejected():
    with pytest.raises(ValueError):
        EventEmitter().on('tick', 'nope')


@pytest.mark.asyncio
async def test_wait_returns_emitted_args():
    emitter = EventEmitter()

    waiter = asyncio.create_task(emitter.wait('tick', timeout=1.0))
    await asyncio.sleep(0)
    emitter.emit('tick', 'a', 2)

    assert await waiter == ('a', 2)
    assert emitter.listenerCount('tick') == 0


@pytest.mark.asyncio
async def test_wait_timeout_cleans_up():
    emitter = EventEmitter()

    with pytest.raises(asyncio.TimeoutError):
        await emitter.wait('tick', timeout=0.01)
    assert emitter.listenerCount('tick') == 0


@pytest.mark.asyncio
async def test_coroutine_listener_is_scheduled():
    emitter = EventEmitter()
    done = asyncio.Event()

    async def listener(value):
        assert value == 5
        done.set()

    emitter.on('tick', listener)
    emitter.emit('tick', 5)

    await asyncio.wait_for(done.wait(), 1.0)
