"""
Players: Resolves numeric slot ids into Player objects for the connected session.

Populated from the server's Connected packet and cleared on every reconnect.

Property of Uncompromising Sensors LLC.
"""

# Imports
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# Local imports
from apsync.events import SocketEvents
from apsync.logging import getLogger


SERVER_SLOT = 0


@dataclass(frozen=True)
class Player:
    """One slot of the multiworld"""

    team: int
    slot: int
    name: str
    alias: str = ""
    game: str = ""

    def __str__(self) -> str:
        return self.alias or self.name


class PlayersManager:
    """
    Tracks players of the connected session.

    findPlayer() is the resolution step used when building Item objects;
    every slot sent by the server resolves while a session is connected.
    """

    def __init__(self, socket):
        self.log = getLogger()
        self._players: Dict[tuple, Player] = {}
        self._self: Optional[Player] = None
        socket.on(SocketEvents.CONNECTED.value, self._onConnected)


    def _onConnected(self, packet: Dict[str, Any]) -> None:
        team, slot = packet['team'], packet['slot']
        slotInfo = packet.get('slot_info', {})

        players: Dict[tuple, Player] = {}
        for entry in packet.get('players', []):
            info = slotInfo.get(str(entry['slot']), {})
            player = Player(team=entry['team'], slot=entry['slot'], name=entry['name'],
                            alias=entry.get('alias', ''), game=info.get('game', ''))
            players[(player.team, player.slot)] = player

        self._players = players
        self._self = players.get((team, slot)) or Player(team=team, slot=slot, name=f'Player{slot}')
        self.log.info('Players loaded', team=team, slot=slot, playerCount=len(players))


    @property
    def self(self) -> Player:
        if self._self is None:
            raise RuntimeError('No session connected; player self is unavailable')
        return self._self


    @property
    def players(self) -> List[Player]:
        return list(self._players.values())


    def findPlayer(self, slot: int, team: Optional[int] = None) -> Optional[Player]:
        if team is None:
            team = self.self.team
        if slot == SERVER_SLOT:
            return Player(team=team, slot=SERVER_SLOT, name='Archipelago', game='Archipelago')
        return self._players.get((team, slot))
