"""apsync.transport - socket layer between the multiworld server and the managers.

Public API:
    - ClientSocket: Abstract base class for socket adapters
    - createSocket: Factory function for creating sockets from server addresses
    - normalizeAddress: 'host[:port]' -> ws://host:port (default port 38281)
    - registerAdapter: Register custom socket adapters
    - WebSocketSocket: aiohttp websocket implementation
    - LoopbackSocket: In-process implementation for hosts and tests

Default Adapters:
    - WebSocketSocket: Registered for 'ws', 'wss' schemes
    - LoopbackSocket: Registered for 'loopback' scheme

Usage:
    from apsync.transport import createSocket

    socket = createSocket('ws://localhost:38281')
    socket.on('receivedItems', lambda packet: print(packet['index']))
    await socket.connect('ws://localhost:38281')
    await socket.send({'cmd': 'Sync'})
    await socket.close()

Property of Uncompromising Sensors LLC.
"""

from .socketBase import ClientSocket, commandToEvent, encodePackets, decodePackets
from .socketFactory import (
    createSocket,
    normalizeAddress,
    registerAdapter,
    SocketRegistry,
    getDefaultRegistry
)
from .websocketSocket import WebSocketSocket
from .loopbackSocket import LoopbackSocket

# Register default adapters
registerAdapter('ws', WebSocketSocket)
registerAdapter('wss', WebSocketSocket)
registerAdapter('loopback', LoopbackSocket)

__all__ = [
    'ClientSocket',
    'commandToEvent',
    'encodePackets',
    'decodePackets',
    'createSocket',
    'normalizeAddress',
    'registerAdapter',
    'SocketRegistry',
    'getDefaultRegistry',
    'WebSocketSocket',
    'LoopbackSocket'
]
