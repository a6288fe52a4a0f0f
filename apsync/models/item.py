"""
Item: One item grant resolved into domain form.

Property of Uncompromising Sensors LLC.
"""

from dataclasses import dataclass, field
from enum import IntFlag
from types import MappingProxyType
from typing import Any, Mapping

from apsync.players import Player


class ItemFlags(IntFlag):
    """Classification bits carried in NetworkItem.flags"""
    FILLER = 0
    PROGRESSION = 0b001
    USEFUL = 0b010
    TRAP = 0b100


@dataclass(frozen=True)
class Item:
    """Received item: raw wire item plus resolved sender and receiver"""

    networkItem: Mapping[str, Any] = field(repr=False, hash=False)
    sender: Player
    receiver: Player

    def __post_init__(self):
        object.__setattr__(self, 'networkItem', MappingProxyType(dict(self.networkItem)))

    @property
    def id(self) -> int:
        return self.networkItem['item']

    @property
    def locationId(self) -> int:
        return self.networkItem['location']

    @property
    def flags(self) -> ItemFlags:
        return ItemFlags(self.networkItem.get('flags', 0))

    @property
    def progression(self) -> bool:
        return bool(self.flags & ItemFlags.PROGRESSION)

    @property
    def useful(self) -> bool:
        return bool(self.flags & ItemFlags.USEFUL)

    @property
    def trap(self) -> bool:
        return bool(self.flags & ItemFlags.TRAP)

    @property
    def filler(self) -> bool:
        return self.flags == ItemFlags.FILLER
