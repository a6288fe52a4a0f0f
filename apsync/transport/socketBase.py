"""
ClientSocket: Abstract base for the multiworld server connection.
connect(uri, **opts), send(*packets), close()
Inbound packet arrays are decoded and re-emitted as events named after the command:
    ReceivedItems -> 'receivedItems', Connected -> 'connected', SetReply -> 'setReply'

Property of Uncompromising Sensors LLC.
"""


# Imports
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import orjson

# Local imports
from apsync.events import EventEmitter, SocketEvents


def commandToEvent(cmd: str) -> str:
    """'ReceivedItems' -> 'receivedItems'"""
    return cmd[:1].lower() + cmd[1:]


def encodePackets(packets) -> bytes:
    return orjson.dumps(list(packets))


def decodePackets(data: bytes | str) -> List[Dict[str, Any]]:
    decoded = orjson.loads(data)
    if isinstance(decoded, dict):
        return [decoded]
    return decoded


class ClientSocket(EventEmitter, ABC):
    """
    Abstract base class for socket adapters.

    Lifecycle States:
        - CLOSED: Not connected (initial and final state)
        - CONNECTING: connect() in progress
        - READY: Packets may be sent and are being received"""


    def __init__(self):
        super().__init__()
        self._state = 'CLOSED'
        self._endpoint: Optional[str] = None
        self._instanceId = str(uuid.uuid4())[:8]
        self._packetsReceived = 0
        self._packetsSent = 0


    # ===== Core Abstract Methods (Must Implement) =====
    @abstractmethod
    async def connect(self, uri: str, **opts) -> None:
        pass


    @abstractmethod
    async def send(self, *packets: Dict[str, Any]) -> None:
        pass


    @abstractmethod
    async def close(self) -> None:
        pass


    # ===== Core Properties =====
    @property
    @abstractmethod
    def transportType(self) -> str:
        pass


    @property
    def state(self) -> str:
        return self._state


    @property
    def isConnected(self) -> bool:
        return self._state == 'READY'


    @property
    def endpoint(self) -> Optional[str]:
        return self._endpoint


    def status(self) -> Dict[str, Any]:
        return {'state': self._state, 'endpoint': self._endpoint, 'transport': self.transportType,
                'packetsReceived': self._packetsReceived, 'packetsSent': self._packetsSent}


    # ===== Helper Methods =====
    def _requireReady(self):
        if self._state != 'READY':
            raise RuntimeError(f'{type(self).__name__} not connected')


    def _dispatchPackets(self, packets: List[Dict[str, Any]]) -> None:
        """Emit each packet as an event, in the order the server sent them."""
        for packet in packets:
            cmd = packet.get('cmd')
            if not cmd:
                self.log.warning('Dropping packet without cmd', transport=self.transportType, endpoint=self._endpoint)
                continue
            self._packetsReceived += 1
            self.emit(commandToEvent(cmd), packet)


    def _markClosed(self, reason: str = 'closed') -> None:
        if self._state == 'CLOSED':
            return
        self._state = 'CLOSED'
        self.log.info('Socket closed', transport=self.transportType, endpoint=self._endpoint, reason=reason,
                      instanceId=self._instanceId)
        self.emit(SocketEvents.DISCONNECTED.value, reason)


    # ===== Context Manager Support =====
    async def __aenter__(self):
        return self


    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
