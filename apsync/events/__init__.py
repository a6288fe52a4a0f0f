"""
Events: named publish/subscribe used between sockets, managers and hosts.

Property of Uncompromising Sensors LLC.
"""

from .eventEmitter import EventEmitter
from .itemEvents import ItemEvents, SocketEvents

__all__ = ['EventEmitter', 'ItemEvents', 'SocketEvents']
