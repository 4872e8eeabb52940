"""
Session Module - Manages ephemeral game rooms.

A session represents one match:
- Created when a player creates a game
- Holds the Game aggregate for the room
- Destroyed when the game ends or every player has left

Sessions are EPHEMERAL: no persistence to database.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
