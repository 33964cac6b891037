"""
Session Module - Manages ephemeral play sessions.

A session represents one player at one front end:
- Created when the player opens the game
- Holds its own engine (and so its own round)
- Paces host reveals for display
- Destroyed when the player leaves

Sessions are EPHEMERAL:
- No persistence to database
- Nothing shared between sessions
"""

from .manager import SessionManager, Session, SessionState
from .staging import StagedReveal, paced

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "StagedReveal",
    "paced",
]
