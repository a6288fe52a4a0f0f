"""
DataStorageManager: Subscribe-and-notify access to the server's key/value store.

notify(keys, callback) -> snapshot dict
    Sends SetNotify + Get, resolves with the Retrieved reply for those keys.
    Later SetReply packets for a subscribed key call callback(key, value, originalValue).

On every 'connected' packet, subscriptions are dropped and pending fetches
fail with ConnectionResetError; owners re-subscribe for the new session.

Property of Uncompromising Sensors LLC.
"""

# Imports
import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence

# Local imports
from apsync.events import SocketEvents
from apsync.logging import getLogger


DataChangeCallback = Callable[[str, Any, Any], None]


class DataStorageManager:
    """Key/value notification collaborator bound to one socket"""

    def __init__(self, socket):
        self.log = getLogger()
        self._socket = socket
        self._callbacks: Dict[str, List[DataChangeCallback]] = {}
        self._pending: List[tuple] = []  # (keys, future) in request order

        socket.on(SocketEvents.CONNECTED.value, self._onConnected)
        socket.on(SocketEvents.RETRIEVED.value, self._onRetrieved)
        socket.on(SocketEvents.SET_REPLY.value, self._onSetReply)


    async def notify(self, keys: Sequence[str], callback: DataChangeCallback,
                     timeout: Optional[float] = None) -> Dict[str, Any]:
        """Subscribe callback to keys and return their current values."""
        keys = list(keys)
        for key in keys:
            self._callbacks.setdefault(key, []).append(callback)

        await self._socket.send({'cmd': 'SetNotify', 'keys': keys})
        return await self.fetch(keys, timeout=timeout)


    async def fetch(self, keys: Sequence[str], timeout: Optional[float] = None) -> Dict[str, Any]:
        """Get current values of keys without subscribing."""
        keys = list(keys)
        future = asyncio.get_running_loop().create_future()
        request = (set(keys), future)
        self._pending.append(request)

        try:
            await self._socket.send({'cmd': 'Get', 'keys': keys})
            result = await asyncio.wait_for(future, timeout)
        finally:
            if request in self._pending:
                self._pending.remove(request)

        self.log.debug('Fetched keys', keys=keys)
        return {key: result.get(key) for key in keys}


    def unsubscribe(self, key: str, callback: DataChangeCallback) -> None:
        callbacks = self._callbacks.get(key, [])
        if callback in callbacks:
            callbacks.remove(callback)
        if not callbacks:
            self._callbacks.pop(key, None)


    def subscribedKeys(self) -> List[str]:
        return list(self._callbacks.keys())


    def _onConnected(self, packet: Dict[str, Any]) -> None:
        self._callbacks = {}
        pending, self._pending = self._pending, []
        for _, future in pending:
            if not future.done():
                future.set_exception(ConnectionResetError('Session reconnected before data storage reply'))
        if pending:
            self.log.warning('Dropped pending data storage fetches on reconnect', count=len(pending))


    def _onRetrieved(self, packet: Dict[str, Any]) -> None:
        values = packet.get('keys', {})
        # Replies arrive in request order; resolve the oldest request they cover
        for request in self._pending:
            keys, future = request
            if not future.done() and keys.issubset(values.keys()):
                self._pending.remove(request)
                future.set_result(values)
                return
        self.log.debug('Unmatched Retrieved packet', keys=list(values.keys()))


    def _onSetReply(self, packet: Dict[str, Any]) -> None:
        key = packet['key']
        for callback in list(self._callbacks.get(key, [])):
            callback(key, packet.get('value'), packet.get('original_value'))
