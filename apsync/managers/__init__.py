"""
Managers: stateful views over the connected session.

Property of Uncompromising Sensors LLC.
"""

from .itemsManager import ItemsManager, HintSession, hintsStorageKey

__all__ = ['ItemsManager', 'HintSession', 'hintsStorageKey']
