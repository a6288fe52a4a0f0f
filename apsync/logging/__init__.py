"""
apsync Logging - hierarchical structured logger with automatic name detection.

API:
    from apsync.logging import getLogger

    # Class-level (auto-detect once in __init__)
    class DataStorageManager:
        def __init__(self):
            self.log = getLogger()  # Auto: 'storage.dataStorage.DataStorageManager'

        def notify(self, keys):
            self.log.info("Subscribing", keys=keys)

    # Global configuration (optional, once at app startup)
    from apsync.logging import configureLogging
    configureLogging(logDir='../logs', level='DEBUG')
"""

from .logger import getLogger, configureLogging
from .context import (
    setSessionContext,
    getSessionContext,
    clearSessionContext,
    installSessionContextFilter,
    SessionContextFilter
)

__all__ = [
    'getLogger',
    'configureLogging',
    'setSessionContext',
    'getSessionContext',
    'clearSessionContext',
    'installSessionContextFilter',
    'SessionContextFilter'
]
