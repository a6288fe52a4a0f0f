"""
Loopback Socket Adapter

In-process socket with no network underneath. The embedding host (or a test)
plays the server: receive() injects server packets, sent records what the
client sent.

URI Schemes:
    loopback://<name>

Property of Uncompromising Sensors LLC.
"""


# Imports
from typing import Any, Dict, List

# Local imports
from .socketBase import ClientSocket, decodePackets, encodePackets


# Class
class LoopbackSocket(ClientSocket):
    """Loopback socket; packets round-trip through the JSON codec like the real wire."""


    def __init__(self):
        super().__init__()
        self.sent: List[Dict[str, Any]] = []


    @property
    def transportType(self) -> str:
        return 'loopback'


    async def connect(self, uri: str = 'loopback://local', **opts) -> None:
        if self._state == 'READY':
            raise RuntimeError('LoopbackSocket already connected')
        self._endpoint = uri
        self._state = 'READY'
        self.log.debug('LoopbackSocket connected', transport=self.transportType, endpoint=uri)


    async def send(self, *packets: Dict[str, Any]) -> None:
        self._requireReady()
        self.sent.extend(decodePackets(encodePackets(packets)))
        self._packetsSent += len(packets)


    async def close(self) -> None:
        self._markClosed('closed by client')


    def receive(self, *packets: Dict[str, Any]) -> None:
        """Deliver server packets as if read from the wire."""
        self._requireReady()
        self._dispatchPackets(decodePackets(encodePackets(packets)))


    def sentCommands(self, cmd: str) -> List[Dict[str, Any]]:
        return [packet for packet in self.sent if packet.get('cmd') == cmd]
