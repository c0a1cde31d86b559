"""
Session Module - Manages in-memory game sessions.

A session represents one game:
- Created when players open a table
- Holds the current game state and its version
- Applies actions one at a time
- Destroyed when the players leave

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, Session

__all__ = [
    "SessionManager",
    "Session",
]
