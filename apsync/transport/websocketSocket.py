"""
WebSocket Socket Adapter

API:
    connect(uri, **opts)   # Open websocket to the multiworld server
    send(*packets)         # Send a JSON packet array
    close()                # Close socket and session

Options:
    heartbeat (float, default: 30.0)
    closeTimeout (float, default: 10.0)
    maxMessageSize (int, default: 0 = unlimited)

URI Schemes:
    ws://host:port
    wss://host:port

Design:
    - One background reader task per connection, packets dispatched in arrival order
    - No reconnect: a dropped socket emits 'disconnected' and stays CLOSED

Property of Uncompromising Sensors LLC.
"""


# Imports
import asyncio
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import aiohttp
from aiohttp import WSMsgType

# Local imports
from .socketBase import ClientSocket, decodePackets, encodePackets


# Class
class WebSocketSocket(ClientSocket):
    """aiohttp websocket client for the multiworld server."""

    _VALID_CONNECT_OPTS = {'heartbeat', 'closeTimeout', 'maxMessageSize'}


    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        super().__init__()
        self._session = session
        self._ownsSession = session is None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._readerTask: Optional[asyncio.Task] = None


    @property
    def transportType(self) -> str:
        return 'websocket'


    async def connect(self, uri: str, **opts) -> None:

        if self._state != 'CLOSED':
            raise RuntimeError('WebSocketSocket already connected')

        unknown = set(opts) - self._VALID_CONNECT_OPTS
        if unknown:
            raise ValueError(f"Unknown options for WebSocketSocket: {', '.join(sorted(unknown))}")

        scheme = urlparse(uri).scheme.lower()
        if scheme not in ('ws', 'wss'):
            raise ValueError(f"Unsupported websocket scheme '{scheme}'. Supported: ws, wss")

        self._state = 'CONNECTING'
        if self._session is None:
            self._session = aiohttp.ClientSession()

        try:
            self._ws = await self._session.ws_connect(
                uri,
                heartbeat=opts.get('heartbeat', 30.0),
                timeout=aiohttp.ClientWSTimeout(ws_close=opts.get('closeTimeout', 10.0)),
                max_msg_size=opts.get('maxMessageSize', 0),
            )
        except Exception as e:
            self._state = 'CLOSED'
            self.log.error(f'Connection failed: {e}', transport=self.transportType, endpoint=uri)
            await self._closeSession()
            raise

        self._endpoint = uri
        self._state = 'READY'
        self._readerTask = asyncio.get_running_loop().create_task(self._readLoop())
        self.log.info('WebSocketSocket connected', transport=self.transportType, endpoint=uri,
                      instanceId=self._instanceId)


    async def send(self, *packets: Dict[str, Any]) -> None:
        self._requireReady()
        await self._ws.send_str(encodePackets(packets).decode())
        self._packetsSent += len(packets)


    async def close(self) -> None:
        if self._readerTask and not self._readerTask.done():
            self._readerTask.cancel()
            try:
                await self._readerTask
            except asyncio.CancelledError:
                pass
        self._readerTask = None

        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None
        await self._closeSession()
        self._markClosed('closed by client')


    async def _readLoop(self):
        """Decode and dispatch every inbound frame until the socket closes."""
        reason = 'server closed connection'
        async for msg in self._ws:
            if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                self._dispatchPackets(decodePackets(msg.data))
            elif msg.type == WSMsgType.ERROR:
                reason = f'websocket error: {self._ws.exception()}'
                self.log.error(reason, transport=self.transportType, endpoint=self._endpoint)
                break
        self._markClosed(reason)


    async def _closeSession(self):
        if self._ownsSession and self._session is not None:
            await self._session.close()
            self._session = None
