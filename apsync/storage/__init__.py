"""
Storage: server key/value store access.

Property of Uncompromising Sensors LLC.
"""

from .dataStorage import DataStorageManager, DataChangeCallback

__all__ = ['DataStorageManager', 'DataChangeCallback']
