"""
Client: Composition root for one multiworld connection.

Owns the socket and wires players, data storage and items managers to it.
Construction order matters: managers observe 'connected' in registration
order, so players resolve self before ItemsManager computes its hint key.

Usage:
    client = Client(ClientConfig(uri='ws://localhost:38281'))
    client.items.on('itemsReceived', lambda items, index: ...)
    await client.connect()
    await client.socket.send(connectPacket)  # handshake is the host's job

Property of Uncompromising Sensors LLC.
"""

# Imports
from typing import Optional

# Local imports
from apsync.config import ClientConfig
from apsync.logging import getLogger, configureLogging
from apsync.managers import ItemsManager
from apsync.players import PlayersManager
from apsync.storage import DataStorageManager
from apsync.transport import ClientSocket, createSocket, normalizeAddress


class Client:

    def __init__(self, config: Optional[ClientConfig] = None, socket: Optional[ClientSocket] = None,
                 setupLogging: bool = False):
        self.config = config or ClientConfig()
        if setupLogging:
            configureLogging(logDir=self.config.logDir, level=self.config.logLevel,
                             console=self.config.console, file=self.config.logFile)
        self.log = getLogger()

        self.socket = socket or createSocket(self.config.uri)
        self.players = PlayersManager(self.socket)
        self.storage = DataStorageManager(self.socket)
        self.items = ItemsManager(self.socket, self.players, self.storage,
                                  snapshotTimeout=self.config.snapshotTimeout)


    async def connect(self, uri: Optional[str] = None, **opts) -> None:
        uri = normalizeAddress(uri or self.config.uri)
        self.log.info('Connecting', endpoint=uri, transport=self.socket.transportType)
        await self.socket.connect(uri, **opts)


    async def close(self) -> None:
        await self.socket.close()


    async def __aenter__(self):
        return self


    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
