"""
Domain entities built from wire packets.

Property of Uncompromising Sensors LLC.
"""

from .item import Item, ItemFlags
from .hint import Hint, HintStatus

__all__ = ['Item', 'ItemFlags', 'Hint', 'HintStatus']
