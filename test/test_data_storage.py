"""
DataStorageManager tests

Run: python -m pytest test/test_data_storage.py -v

Property of Uncompromising Sensors LLC.
"""

import asyncio

import pytest

from apsync.storage import DataStorageManager
from apsync.transport import LoopbackSocket
from loopbackHelpers import connectedPacket, settle


async def _storage():
    socket = LoopbackSocket()
    await socket.connect()
    return socket, DataStorageManager(socket)


@pytest.mark.asyncio
async def test_notify_subscribes_and_returns_snapshot():
    socket, storage = await _storage()
    changes = []

    task = asyncio.create_task(storage.notify(['alpha'], lambda *args: changes.append(args)))
    await settle()
    assert [packet['cmd'] for packet in socket.sent] == ['SetNotify', 'Get']

    socket.receive({'cmd': 'Retrieved', 'keys': {'alpha': [1, 2]}})
    assert await task == {'alpha': [1, 2]}

    socket.receive({'cmd': 'SetReply', 'key': 'alpha', 'value': [1, 2, 3], 'original_value': [1, 2]})
    socket.receive({'cmd': 'SetReply', 'key': 'beta', 'value': 0})
    assert changes == [('alpha', [1, 2, 3], [1, 2])]
    assert storage.subscribedKeys() == ['alpha']


@pytest.mark.asyncio
async def test_retrieved_resolves_matching_request_only():
    socket, storage = await _storage()

    first = asyncio.create_task(storage.fetch(['a']))
    second = asyncio.create_task(storage.fetch(['b']))
    await settle()

    socket.receive({'cmd': 'Retrieved', 'keys': {'b': 'B'}})
    assert await second == {'b': 'B'}
    assert not first.done()

    socket.receive({'cmd': 'Retrieved', 'keys': {'a': 'A'}})
    assert await first == {'a': 'A'}


@pytest.mark.asyncio
async def test_reconnect_fails_pending_and_drops_callbacks():
    socket, storage = await _storage()
    changes = []

    task = asyncio.create_task(storage.notify(['alpha'], lambda *args: changes.append(args)))
    await settle()
    socket.receive(connectedPacket())

    with pytest.raises(ConnectionResetError):
        await task
    socket.receive({'cmd': 'SetReply', 'key': 'alpha', 'value': 1})
    assert changes == []
    assert storage.subscribedKeys() == []


@pytest.mark.asyncio
async def test_fetch_timeout_propagates():
    socket, storage = await _storage()

    with pytest.raises(asyncio.TimeoutError):
        await storage.fetch(['slow'], timeout=0.01)


@pytest.mark.asyncio
async def test_unsubscribe():
    socket, storage = await _storage()
    changes = []
    callback = lambda *args: changes.append(args)

    task = asyncio.create_task(storage.notify(['alpha'], callback))
    await settle()
    socket.receive({'cmd': 'Retrieved', 'keys': {'alpha': None}})
    await task

    storage.unsubscribe('alpha', callback)
    socket.receive({'cmd': 'SetReply', 'key': 'alpha', 'value': 1})
    assert changes == []
