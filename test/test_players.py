"""
PlayersManager and Client wiring tests

Run: python -m pytest test/test_players.py -v

Property of Uncompromising Sensors LLC.
"""

import pytest

from apsync import Client, ClientConfig, PlayersManager
from apsync.transport import LoopbackSocket, WebSocketSocket
from loopbackHelpers import connectedPacket, connectSession, makeClient


@pytest.mark.asyncio
async def test_self_unavailable_before_connected():
    socket = LoopbackSocket()
    players = PlayersManager(socket)

    with pytest.raises(RuntimeError):
        players.self


@pytest.mark.asyncio
async def test_connected_populates_players():
    socket = LoopbackSocket()
    await socket.connect()
    players = PlayersManager(socket)

    socket.receive(connectedPacket(team=0, slot=2))

    assert players.self.name == 'Bob'
    assert str(players.self) == 'Bobby'
    assert players.self.game == 'Super Metroid'
    assert players.findPlayer(3).name == 'Carol'
    assert str(players.findPlayer(3)) == 'Carol'
    assert players.findPlayer(3, team=1) is None
    assert players.findPlayer(42) is None
    assert len(players.players) == 3


@pytest.mark.asyncio
async def test_client_wires_managers_to_socket():
    client = await makeClient()
    assert client.socket.isConnected

    await connectSession(client, team=0, slot=3)
    assert client.players.self.name == 'Carol'
    assert client.items.hintsKey == '_read_hints_0_3'

    await client.close()
    assert not client.socket.isConnected


def test_client_builds_socket_from_config():
    client = Client(ClientConfig(uri='loopback://configured'))
    assert isinstance(client.socket, LoopbackSocket)


def test_client_accepts_bare_server_address():
    client = Client(ClientConfig(uri='archipelago.gg:38281'))
    assert isinstance(client.socket, WebSocketSocket)
