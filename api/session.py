"""In-memory registry of game sessions with expiry."""

import logging
from datetime import datetime, timedelta
from uuid import uuid4

from fastapi import HTTPException

from config import config
from engine.game import GameSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Game sessions keyed by session ID.

    Each session lives in process memory and expires after ``ttl`` seconds
    without activity.
    """

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.session_ttl
        self._sessions: dict[str, tuple[GameSession, datetime]] = {}

    def _expiry(self) -> datetime:
        return datetime.now() + timedelta(seconds=self._ttl)

    async def create(self, game: GameSession) -> str:
        """Register a game and return its new session ID."""
        session_id = str(uuid4())
        self._sessions[session_id] = (game, self._expiry())
        logger.info("Created session %s", session_id)
        return session_id

    async def replace(self, session_id: str, game: GameSession) -> None:
        """Put a fresh game behind an existing session ID."""
        self._sessions[session_id] = (game, self._expiry())

    async def get(self, session_id: str) -> GameSession | None:
        """Return the session's game and extend its lifetime, or None if unknown."""
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        game, expiry = entry
        if expiry < datetime.now():
            await self.delete(session_id)
            return None

        self._sessions[session_id] = (game, self._expiry())
        return game

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Expired %d sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


# Global registry instance
_registry: SessionRegistry | None = None


def get_registry() -> SessionRegistry:
    """Get or create the session registry."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


async def require_game(session_id: str | None) -> GameSession:
    """
    Look up the game behind a session ID.

    Raises:
        HTTPException: 404 when the session is missing or expired
    """
    game = await get_registry().get(session_id) if session_id else None
    if game is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return game
