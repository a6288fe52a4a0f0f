"""
Item and hint event names published by ItemsManager.

    itemsReceived(items: list[Item], startIndex: int)
    hintsInitialized(hints: list[Hint])
    hintReceived(hint: Hint)
    hintFound(hint: Hint)

Property of Uncompromising Sensors LLC.
"""

from enum import Enum


class ItemEvents(str, Enum):
    """Event names emitted by ItemsManager"""
    ITEMS_RECEIVED = "itemsReceived"
    HINTS_INITIALIZED = "hintsInitialized"
    HINT_RECEIVED = "hintReceived"
    HINT_FOUND = "hintFound"


class SocketEvents(str, Enum):
    """Server packet events consumed from the socket"""
    CONNECTED = "connected"
    RECEIVED_ITEMS = "receivedItems"
    RETRIEVED = "retrieved"
    SET_REPLY = "setReply"
    DISCONNECTED = "disconnected"
