"""
Socket layer tests: factory, loopback codec, aiohttp websocket round trip.

Run: python -m pytest test/test_transport.py -v

Property of Uncompromising Sensors LLC.
"""

import asyncio

import orjson
import pytest
from aiohttp import web, WSMsgType
from aiohttp.test_utils import TestServer

from apsync.transport import (LoopbackSocket, SocketRegistry, WebSocketSocket, commandToEvent,
                              createSocket, decodePackets, normalizeAddress)


class TestFactory:

    def test_scheme_selects_adapter(self):
        assert isinstance(createSocket('ws://localhost:38281'), WebSocketSocket)
        assert isinstance(createSocket('wss://archipelago.gg:38281'), WebSocketSocket)
        assert isinstance(createSocket('loopback://local'), LoopbackSocket)

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            createSocket('nats://localhost')
        with pytest.raises(ValueError):
            createSocket('  ')

    def test_bare_address_is_a_websocket(self):
        assert isinstance(createSocket('localhost:38281'), WebSocketSocket)
        assert isinstance(createSocket('archipelago.gg'), WebSocketSocket)

    def test_normalize_address(self):
        assert normalizeAddress('archipelago.gg') == 'ws://archipelago.gg:38281'
        assert normalizeAddress('localhost:40000') == 'ws://localhost:40000'
        assert normalizeAddress('WSS://archipelago.gg') == 'wss://archipelago.gg:38281'
        assert normalizeAddress('wss://archipelago.gg:1234/path') == 'wss://archipelago.gg:1234/path'
        assert normalizeAddress('loopback://local') == 'loopback://local'
        with pytest.raises(ValueError):
            normalizeAddress('ws://host:notaport')
        with pytest.raises(ValueError):
            normalizeAddress('ws://')

    def test_custom_registry(self):
        registry = SocketRegistry()
        registry.register('test', LoopbackSocket)
        assert isinstance(createSocket('test://x', registry=registry), LoopbackSocket)
        with pytest.raises(TypeError):
            registry.register('bad', dict)


class TestCodec:

    def test_command_to_event(self):
        assert commandToEvent('ReceivedItems') == 'receivedItems'
        assert commandToEvent('SetReply') == 'setReply'

    def test_decode_single_packet_object(self):
        assert decodePackets(b'{"cmd": "Connected"}') == [{'cmd': 'Connected'}]


class TestLoopback:

    @pytest.mark.asyncio
    async def test_send_requires_connection(self):
        socket = LoopbackSocket()
        with pytest.raises(RuntimeError):
            await socket.send({'cmd': 'Sync'})

    @pytest.mark.asyncio
    async def test_packets_dispatched_in_order_by_command(self):
        socket = LoopbackSocket()
        await socket.connect()
        seen = []
        socket.on('receivedItems', lambda packet: seen.append(('items', packet['index'])))
        socket.on('setReply', lambda packet: seen.append(('reply', packet['key'])))

        socket.receive({'cmd': 'ReceivedItems', 'index': 4, 'items': []},
                       {'cmd': 'SetReply', 'key': 'k'},
                       {'no': 'cmd'})

        assert seen == [('items', 4), ('reply', 'k')]
        assert socket.status()['packetsReceived'] == 2

    @pytest.mark.asyncio
    async def test_close_emits_disconnected(self):
        socket = LoopbackSocket()
        await socket.connect()
        reasons = []
        socket.on('disconnected', reasons.append)

        await socket.close()
        await socket.close()

        assert reasons == ['closed by client']
        assert not socket.isConnected


@pytest.mark.asyncio
async def test_websocket_round_trip():
    received = []

    async def handler(request):
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        await ws.send_str(orjson.dumps([{'cmd': 'RoomInfo', 'seed_name': 'abc'}]).decode())
        async for msg in ws:
            if msg.type == WSMsgType.TEXT or msg.type == WSMsgType.BINARY:
                received.extend(orjson.loads(msg.data))
                await ws.send_str(orjson.dumps([{'cmd': 'ReceivedItems', 'index': 0, 'items': []}]).decode())
        return ws

    app = web.Application()
    app.router.add_get('/', handler)
    server = TestServer(app)
    await server.start_server()

    socket = WebSocketSocket()
    roomInfo = asyncio.Queue()
    socket.on('roomInfo', roomInfo.put_nowait)
    try:
        await socket.connect(str(server.make_url('/')).replace('http://', 'ws://'))
        assert (await asyncio.wait_for(roomInfo.get(), 5.0))['seed_name'] == 'abc'

        waiter = asyncio.create_task(socket.wait('receivedItems', timeout=5.0))
        await asyncio.sleep(0)
        await socket.send({'cmd': 'Sync'})
        (packet,) = await waiter
        assert packet['index'] == 0
        assert received == [{'cmd': 'Sync'}]
    finally:
        await socket.close()
        await server.close()

    assert socket.state == 'CLOSED'


@pytest.mark.asyncio
async def test_websocket_rejects_bad_options_and_scheme():
    socket = WebSocketSocket()
    with pytest.raises(ValueError):
        await socket.connect('ws://localhost:1', bogus=True)
    with pytest.raises(ValueError):
        await socket.connect('http://localhost:1')
    assert socket.state == 'CLOSED'
