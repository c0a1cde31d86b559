"""
Session Manager - Creates and manages game sessions.

A session is one game on one shared table:
- Created when a game is opened
- Holds the single canonical GameState
- Serializes every action against that state
- Destroyed when the players leave

CONCURRENCY:
- One lock per session; actions are applied one at a time
- Every accepted action bumps the session version
- Callers may send the version they last saw; actions built on an
  older snapshot are rejected with STALE_STATE

PERSISTENCE:
- None. Sessions live in memory only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import threading
import time
import uuid

from ..engine_core.state import GameState, Player, Screen, initial_state
from ..engine_core.action import Action, ActionResult
from ..engine_core.dice import FaceSource, RandomFaceSource
from ..engine_core.reducer import Reducer

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    An in-memory game session.

    Contains:
    - The current canonical game state and its version
    - The reducer (and through it the dice) for this game
    - A log of human-readable changes
    """
    session_id: str
    created_at: float
    reducer: Reducer
    state: GameState = field(default_factory=initial_state)
    version: int = 0
    seed: int | None = None
    log: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_active(self) -> bool:
        """Check if the game has not finished yet."""
        return self.state.screen != Screen.END_GAME


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions (optionally seeded)
    - Apply actions with per-session locking and version checks
    - Clean up ended and stale sessions
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        seed: int | None = None,
        player_names: list[str] | None = None,
        face_source: FaceSource | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            seed: Seed for the dice (ignored when face_source is given)
            player_names: Names for the players; defaults to two unnamed players
            face_source: Explicit face source, mainly for tests

        Returns:
            New Session on the setup screen
        """
        source = face_source or RandomFaceSource(seed)
        state = initial_state()
        if player_names:
            state = state._copy_with(players=tuple(Player(name=name) for name in player_names))

        session = Session(
            session_id=str(uuid.uuid4()),
            created_at=time.time(),
            reducer=Reducer(face_source=source),
            state=state,
            seed=seed,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info(
            "Created session %s with %d players (seed=%s)",
            session.session_id, state.num_players, seed,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def dispatch(
        self,
        session_id: str,
        action: Action,
        expected_version: int | None = None,
    ) -> ActionResult:
        """
        Apply an action to a session's state.

        The session lock is held for the whole check-apply-store
        sequence, so no caller ever sees a half-applied action.
        """
        session = self.get_session(session_id)
        if not session:
            return ActionResult.failure("Session not found", error_code="SESSION_NOT_FOUND")

        with session._lock:
            if expected_version is not None and expected_version != session.version:
                logger.info(
                    "Rejected %s on session %s: version %d, caller saw %d",
                    action.action_type.value, session_id, session.version, expected_version,
                )
                return ActionResult.failure(
                    f"State has changed (version {session.version}, "
                    f"request built on {expected_version})",
                    error_code="STALE_STATE",
                )

            result = session.reducer.apply(session.state, action)
            if not result.success:
                logger.debug(
                    "Rejected %s on session %s: %s",
                    action.action_type.value, session_id, result.error,
                )
                return result

            session.state = result.new_state
            session.version += 1
            session.log.extend(result.state_changes)
            for change in result.state_changes:
                logger.debug("[%s] %s", session_id, change)
            if not session.is_active():
                logger.info("Session %s reached the end of the game", session_id)
            return result

    def end_session(self, session_id: str) -> bool:
        """
        End a session and drop it from memory.

        Returns False if no such session existed.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session:
            logger.info("Ended session %s", session_id)
        return session is not None

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game has not finished."""
        return [
            sid for sid, session in list(self._sessions.items())
            if session.is_active()
        ]

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Drop finished sessions older than max_age.

        Called periodically to free memory. Returns the removed IDs.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in list(self._sessions.items())
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return to_remove
