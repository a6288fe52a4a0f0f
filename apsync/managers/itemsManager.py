"""
ItemsManager: Tracks received items and known hints for the connected slot.

Items arrive as indexed batches (ReceivedItems) and are written at their
server-assigned index; hints live in the server data store under
_read_hints_<team>_<slot> and arrive as one snapshot plus change notifications.

All state belongs to a HintSession generation that is replaced wholesale on
every 'connected' packet. Async results tagged with an older generation are
discarded.

Gap policy: received is sparse. Indices never delivered hold None, received
keeps them positionally, getItem() raises LookupError for them.

Property of Uncompromising Sensors LLC.
"""

# Imports
import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Optional, Sequence

# Local imports
from apsync.events import EventEmitter, ItemEvents, SocketEvents
from apsync.logging import getLogger, setSessionContext
from apsync.models import Hint, HintStatus, Item


def hintsStorageKey(team: int, slot: int) -> str:
    return f"_read_hints_{team}_{slot}"


@dataclass
class HintSession:
    """Mutable state of one connection generation"""

    generation: int
    hintsKey: Optional[str] = None
    received: List[Optional[Item]] = field(default_factory=list)
    hints: List[Hint] = field(default_factory=list)
    hintIndex: Dict[str, int] = field(default_factory=dict)  # uniqueKey -> position in hints
    initialized: bool = False


class ItemsManager(EventEmitter):
    """
    Manages tracking and receiving of all received items and hints.

    Events (see ItemEvents):
        itemsReceived(items, startIndex)
        hintsInitialized(hints)
        hintReceived(hint)
        hintFound(hint)
    """

    def __init__(self, socket, players, storage, snapshotTimeout: Optional[float] = None):
        super().__init__()
        self.log = getLogger()
        self._socket = socket
        self._players = players
        self._storage = storage
        self._snapshotTimeout = snapshotTimeout
        self._session = HintSession(generation=0)
        self._hintsReady: Optional[asyncio.Task] = None

        socket.on(SocketEvents.RECEIVED_ITEMS.value, self._onReceivedItems)
        socket.on(SocketEvents.CONNECTED.value, self._onConnected)


    # ===== Accessors =====
    @property
    def received(self) -> List[Optional[Item]]:
        """Copy of all items ever received, by index. Undelivered indices are None."""
        return list(self._session.received)


    @property
    def hints(self) -> List[Hint]:
        """
        Copy of all hints for this player, in arrival order.

        Hints populate shortly after connecting, once the data storage snapshot
        arrives. Await hintsReady or listen for hintsInitialized if needed.
        """
        return list(self._session.hints)


    @property
    def count(self) -> int:
        return len(self._session.received)


    @property
    def generation(self) -> int:
        return self._session.generation


    @property
    def hintsKey(self) -> Optional[str]:
        return self._session.hintsKey


    @property
    def hintsInitialized(self) -> bool:
        return self._session.initialized


    @property
    def hintsReady(self) -> Optional[asyncio.Task]:
        """Task fetching the current generation's hint snapshot (None before the first connect)."""
        return self._hintsReady


    def getItem(self, index: int) -> Item:
        received = self._session.received
        if index < 0 or index >= len(received) or received[index] is None:
            raise LookupError(f"No item received at index {index}")
        return received[index]


    async def updateHint(self, player: int, location: int, status: HintStatus) -> None:
        """Ask the server to change a hint's status. FOUND can only be set by the server."""
        status = HintStatus(status)
        if status == HintStatus.FOUND:
            raise ValueError('Cannot set hint status to FOUND')
        await self._socket.send({'cmd': 'UpdateHint', 'player': player, 'location': location,
                                 'status': int(status)})


    # ===== Item stream =====
    def _onReceivedItems(self, packet: Dict[str, Any]) -> None:
        session = self._session
        startIndex = packet['index']
        networkItems = packet['items']
        received = session.received
        receiver = self._players.self

        for offset, networkItem in enumerate(networkItems):
            position = startIndex + offset
            sender = self._players.findPlayer(networkItem['player'])
            if sender is None:
                raise LookupError(f"Unknown sending player {networkItem['player']}")

            if position >= len(received):
                received.extend([None] * (position + 1 - len(received)))
            received[position] = Item(networkItem, sender, receiver)

        count = len(networkItems)
        self.log.debug('Items received', startIndex=startIndex, count=count, total=len(received))
        self.emit(ItemEvents.ITEMS_RECEIVED.value, received[startIndex:startIndex + count], startIndex)


    # ===== Hint state =====
    def _onConnected(self, packet: Dict[str, Any]) -> None:
        player = self._players.self
        session = HintSession(generation=self._session.generation + 1,
                              hintsKey=hintsStorageKey(player.team, player.slot))
        self._session = session

        setSessionContext(player.team, player.slot, session.generation)
        self.log.info('Session reset', hintsKey=session.hintsKey)

        self._hintsReady = asyncio.get_running_loop().create_task(self._initializeHints(session))


    async def _initializeHints(self, session: HintSession) -> List[Hint]:
        try:
            data = await self._storage.notify([session.hintsKey], partial(self._onHintsChanged, session),
                                              timeout=self._snapshotTimeout)
        except Exception as e:
            if session is not self._session:
                self.log.debug('Hint snapshot fetch abandoned by reconnect', staleGeneration=session.generation)
                return []
            self.log.error(f'Hint snapshot fetch failed: {e}', hintsKey=session.hintsKey,
                           errorClass=type(e).__name__)
            raise

        if session is not self._session:
            self.log.debug('Discarding stale hint snapshot', staleGeneration=session.generation)
            return []

        # Notifications may have landed first: keys they announced are not re-announced,
        # but a snapshot that moves one of them forward still reports hintFound
        for networkHint in data.get(session.hintsKey) or []:
            change = self._applyHint(session, networkHint)
            if change is not None and change[0] == ItemEvents.HINT_FOUND.value:
                self.emit(*change)

        session.initialized = True
        self.log.info('Hints initialized', count=len(session.hints))
        hints = list(session.hints)
        self.emit(ItemEvents.HINTS_INITIALIZED.value, hints)
        return hints


    def _onHintsChanged(self, session: HintSession, key: str, value: Optional[Sequence[Dict[str, Any]]],
                        originalValue: Any = None) -> None:
        if session is not self._session:
            self.log.debug('Ignoring hint notification for stale generation', staleGeneration=session.generation)
            return

        for networkHint in value or []:
            change = self._applyHint(session, networkHint)
            if change is not None:
                event, hint = change
                self.emit(event, hint)


    def _applyHint(self, session: HintSession, networkHint: Dict[str, Any]):
        """Merge one hint into session state. Returns (event, hint) or None when nothing changed."""
        key = Hint.getUniqueKey(networkHint)
        position = session.hintIndex.get(key)

        if position is None:
            hint = Hint(networkHint)
            session.hintIndex[key] = len(session.hints)
            session.hints.append(hint)
            return ItemEvents.HINT_RECEIVED.value, hint

        cached = session.hints[position]
        found = bool(networkHint['found'])
        if cached.found and not found:
            # Found is terminal
            self.log.warning('Ignoring found hint reverting to not found', uniqueKey=key)
            return None
        if cached.found and found:
            return None

        hint = Hint(networkHint)
        if cached.found == found and hint.status == cached.status:
            return None

        session.hints[position] = hint
        return ItemEvents.HINT_FOUND.value, hint
