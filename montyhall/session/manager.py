"""
Session Manager - Creates and manages play sessions.

LIFECYCLE:
1. Front end opens a session for a variant -> new engine, in memory only
2. During play:
   - Front end forwards door clicks and stick/switch clicks
   - Engine validates and updates its round
   - Front end re-renders from the snapshot
3. Session ends (or goes stale) -> removed, ALL state deleted

PERSISTENCE RULES:
- NO database
- Each session owns its own engine and its own round
- Nothing is shared between sessions
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import asyncio
import logging
import random
import time
import uuid

from ..engine_core import GameEngine, ActionResult
from ..rules import get_variant, DEFAULT_VARIANT
from .staging import StagedReveal

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a play session."""
    ACTIVE = "active"
    GAME_OVER = "game_over"  # Ended after play
    ABANDONED = "abandoned"  # User quit or session went stale


@dataclass
class Session:
    """
    An ephemeral play session.

    Contains:
    - The engine (and through it, the live round)
    - Any staged reveal still running

    The session is destroyed when it ends.
    State is NOT persisted.
    """
    session_id: str
    engine: GameEngine
    created_at: float
    last_active: float = 0.0

    state: SessionState = SessionState.ACTIVE
    player_name: str = "Player"

    reveal_task: asyncio.Task | None = None

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def touch(self):
        self.last_active = time.time()

    @property
    def is_revealing(self) -> bool:
        return self.reveal_task is not None and not self.reveal_task.done()

    def start_staged_reveal(self, reveal: StagedReveal) -> asyncio.Task:
        """
        Play out an already-selected host reveal on the running event loop.

        The caller must be inside a coroutine.
        """
        self.touch()
        self.reveal_task = asyncio.get_running_loop().create_task(reveal.play_out())
        self.reveal_task.add_done_callback(self._reveal_finished)
        return self.reveal_task

    def _reveal_finished(self, task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Session %s: staged reveal failed: %s", self.session_id, error,
                exc_info=error,
            )

    def cancel_reveal(self) -> bool:
        """Stop an in-flight staged reveal. Returns True if one was running."""
        if not self.is_revealing:
            return False
        self.reveal_task.cancel()
        self.reveal_task = None
        return True

    def reset(self) -> ActionResult:
        """Back to setup, dropping any half-finished reveal."""
        self.touch()
        if self.cancel_reveal():
            logger.info("Session %s: cancelled in-flight reveal on reset", self.session_id)
        return self.engine.reset_to_setup()


class SessionManager:
    """
    Manages play sessions.

    Responsibilities:
    - Create sessions with a fresh engine
    - Track active sessions
    - Clean up ended or stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, rng_factory=None):
        self._sessions: dict[str, Session] = {}
        # Seedable for tests; each session still gets its own generator
        self._rng_factory = rng_factory or random.Random

    def create_session(
        self,
        variant: str = DEFAULT_VARIANT,
        door_count: int | None = None,
        player_name: str = "Player",
    ) -> Session:
        """
        Create a new session.

        Args:
            variant: Name of a built-in variant
            door_count: Optional door count to configure right away
            player_name: Display name

        Returns:
            New Session in setup

        Raises:
            ValueError: unknown variant or door count out of range
        """
        rules = get_variant(variant)
        engine = GameEngine(rules, rng=self._rng_factory())

        if door_count is not None:
            result = engine.configure(door_count)
            if not result.success:
                raise ValueError(result.error)

        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            engine=engine,
            created_at=now,
            last_active=now,
            player_name=player_name,
        )
        self._sessions[session.session_id] = session
        logger.info("Session %s created: variant=%s", session.session_id, rules.name)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> Session | None:
        """
        End a session and clean up.

        The session is removed from memory and handed back with its
        final state (GAME_OVER or ABANDONED).
        Returns None if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return None

        session.cancel_reveal()
        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.info("Session %s ended: %s", session_id, reason)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions idle for longer than max_age_seconds.

        Returns how many were removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
