"""
Hint: Immutable snapshot of one server-tracked hint.

Identity is content-derived (uniqueKey), never the hint's position in the
remote list, so resent or reordered lists map back onto the same record.

Property of Uncompromising Sensors LLC.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping


class HintStatus(IntEnum):
    """Hint status as stored by the server"""
    UNSPECIFIED = 0
    NO_PRIORITY = 10
    AVOID = 20
    PRIORITY = 30
    FOUND = 40


@dataclass(frozen=True)
class Hint:
    """Hint record built from a NetworkHint dict"""

    networkHint: Mapping[str, Any] = field(repr=False, hash=False)
    uniqueKey: str = field(init=False)

    def __post_init__(self):
        # Read-only copy; hashing goes through uniqueKey
        object.__setattr__(self, 'networkHint', MappingProxyType(dict(self.networkHint)))
        object.__setattr__(self, 'uniqueKey', Hint.getUniqueKey(self.networkHint))

    @staticmethod
    def getUniqueKey(networkHint: Mapping[str, Any]) -> str:
        """'finding/receiving/item/location' - same hint across resends"""
        return (f"{networkHint['finding_player']}/{networkHint['receiving_player']}/"
                f"{networkHint['item']}/{networkHint['location']}")

    @property
    def findingPlayer(self) -> int:
        return self.networkHint['finding_player']

    @property
    def receivingPlayer(self) -> int:
        return self.networkHint['receiving_player']

    @property
    def item(self) -> int:
        return self.networkHint['item']

    @property
    def location(self) -> int:
        return self.networkHint['location']

    @property
    def found(self) -> bool:
        return bool(self.networkHint['found'])

    @property
    def entrance(self) -> str:
        return self.networkHint.get('entrance', '')

    @property
    def itemFlags(self) -> int:
        return self.networkHint.get('item_flags', 0)

    @property
    def status(self) -> HintStatus:
        if 'status' in self.networkHint:
            return HintStatus(self.networkHint['status'])
        return HintStatus.FOUND if self.found else HintStatus.UNSPECIFIED
