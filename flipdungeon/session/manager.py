"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Player picks a class and difficulty -> new in-memory session
2. During the game every action goes through the session's reducer;
   the session keeps the latest GameState snapshot
3. Game ends -> score may be saved to the high-score store
4. Session ended -> removed from memory, ALL state deleted

PERSISTENCE RULES:
- NO database for gameplay
- Game state is ephemeral (session-scoped only)
- Only persistence: the high-score list
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..engine_core.action import Action, ActionResult
from ..engine_core.catalog import Catalog
from ..engine_core.reducer import Reducer
from ..engine_core.settings import DEFAULT_SETTINGS, Difficulty, GameSettings
from ..engine_core.state import CharacterClass, GameState
from ..games.flip_dungeon import DEFAULT_CATALOG, new_game

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed, score not yet saved
    ABANDONED = "abandoned"  # Player quit


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - Current canonical game state
    - The catalog its reducer validates against
    - Session metadata

    The session is destroyed when it ends.
    State is NOT persisted.
    """
    session_id: str
    game_state: GameState
    catalog: Catalog
    created_at: float
    player_name: str = "Adventurer"

    state: SessionState = SessionState.ACTIVE
    actions_applied: int = 0
    score_saved: bool = False

    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state is SessionState.ACTIVE

    def apply(self, action: Action) -> ActionResult:
        """Run an action through the reducer and keep the new snapshot."""
        result = Reducer(catalog=self.catalog).apply(self.game_state, action)
        if result.success:
            self.game_state = result.new_state
            self.actions_applied += 1
            if self.game_state.is_over and self.state is SessionState.ACTIVE:
                self.state = SessionState.GAME_OVER
                logger.info("session %s: game over", self.session_id)
        return result


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a freshly set-up game
    - Track active sessions
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, catalog: Catalog = DEFAULT_CATALOG):
        self.catalog = catalog
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        character_class: CharacterClass | str = CharacterClass.DRUID,
        difficulty: Difficulty | str = Difficulty.NORMAL,
        settings: GameSettings = DEFAULT_SETTINGS,
        random_seed: int | None = None,
        player_name: str = "Adventurer",
        extra_locations: int = 0,
    ) -> Session:
        """
        Create a new game session.

        Args:
            character_class: Class to play
            difficulty: Easy, Normal or Hard
            settings: Rule constants
            random_seed: Seed for a reproducible game
            player_name: Name shown on the scoreboard
            extra_locations: Random locations beyond the default four

        Returns:
            New Session ready to play
        """
        session_id = str(uuid.uuid4())
        game_state = new_game(
            character_class=character_class,
            difficulty=difficulty,
            settings=settings,
            random_seed=random_seed,
            catalog=self.catalog,
            extra_locations=extra_locations,
        )
        session = Session(
            session_id=session_id,
            game_state=game_state,
            catalog=self.catalog,
            created_at=time.time(),
            player_name=player_name,
        )
        self._sessions[session_id] = session
        logger.info(
            "session %s created: %s on %s",
            session_id, game_state.player.character_class.value, game_state.difficulty.value,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if reason != "completed" and session.state is SessionState.ACTIVE:
            session.state = SessionState.ABANDONED
        logger.info("session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age.

        Returns the number removed.
        """
        current_time = time.time()
        stale = [
            sid for sid, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)
