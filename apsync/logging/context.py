"""
Logging Session Context

Stamps the active multiworld session (team, slot, generation) onto log records.
Integrates with apsync.logging so reconnect cycles can be told apart in logs.
"""

import logging
from typing import Optional
from contextvars import ContextVar

# Context variables for session identity
_team: ContextVar[Optional[int]] = ContextVar('team', default=None)
_slot: ContextVar[Optional[int]] = ContextVar('slot', default=None)
_generation: ContextVar[Optional[int]] = ContextVar('generation', default=None)


class SessionContextFilter(logging.Filter):
    """
    Logging filter that adds session context to all log records
    """

    def filter(self, record):
        team = _team.get()
        slot = _slot.get()
        generation = _generation.get()

        # Explicit fields passed by the caller win
        if team is not None and not hasattr(record, 'team'):
            record.team = team
        if slot is not None and not hasattr(record, 'slot'):
            record.slot = slot
        if generation is not None and not hasattr(record, 'generation'):
            record.generation = generation

        return True


def setSessionContext(team: int, slot: int, generation: int = None):
    """
    Set session-level context for logging

    Args:
        team: Team number of the connected slot
        slot: Slot number of the connected slot
        generation: Connection generation (optional)
    """
    _team.set(team)
    _slot.set(slot)
    if generation is not None:
        _generation.set(generation)


def getSessionContext() -> dict:
    """Get current session context"""
    return {
        'team': _team.get(),
        'slot': _slot.get(),
        'generation': _generation.get()
    }


def clearSessionContext():
    """Clear session context"""
    _team.set(None)
    _slot.set(None)
    _generation.set(None)


def installSessionContextFilter():
    """
    Install session context filter on root logger

    Called by configureLogging(); safe to call repeatedly
    """
    rootLogger = logging.getLogger()

    for f in rootLogger.filters:
        if isinstance(f, SessionContextFilter):
            return

    rootLogger.addFilter(SessionContextFilter())
