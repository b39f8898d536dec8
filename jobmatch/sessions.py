import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

from .chat import ChatSession
from .completion import CompletionClient
from .config import Settings
from .recommender import RecommendationFlow

logger = logging.getLogger(__name__)


@dataclass
class UserSession:
    """The two independent state machines owned by one browser session."""

    session_id: str
    chat: ChatSession
    recommendations: RecommendationFlow

    async def aclose(self) -> None:
        await self.chat.aclose()


class SessionStore:
    """In-memory session registry; nothing survives a restart.

    Sessions beyond `settings.max_sessions` are evicted least recently used
    first, and evicted sessions are closed.
    """

    def __init__(self, settings: Settings, client: CompletionClient):
        self.settings = settings
        self.client = client
        self._sessions: "OrderedDict[str, UserSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: Optional[str]) -> Optional[UserSession]:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    async def get_or_create(self, session_id: Optional[str]) -> UserSession:
        session = self.get(session_id)
        if session is not None:
            return session

        session = UserSession(
            session_id=uuid.uuid4().hex,
            chat=ChatSession(self.settings, self.client),
            recommendations=RecommendationFlow(self.settings.analysis_delay_seconds),
        )
        self._sessions[session.session_id] = session
        logger.info("session created total=%d", len(self._sessions))

        while len(self._sessions) > max(self.settings.max_sessions, 1):
            _, evicted = self._sessions.popitem(last=False)
            logger.info("session evicted id=%s", evicted.session_id)
            await evicted.aclose()
        return session

    async def close(self, session_id: Optional[str]) -> bool:
        session = self._sessions.pop(session_id, None) if session_id else None
        if session is None:
            return False
        await session.aclose()
        logger.info("session closed total=%d", len(self._sessions))
        return True

    async def aclose(self) -> None:
        while self._sessions:
            _, session = self._sessions.popitem()
            await session.aclose()


__all__ = ["UserSession", "SessionStore"]
