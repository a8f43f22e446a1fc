"""
Session Module
Explicit per-user session context and the manager that owns them.
"""

import time
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .api_utils import GroqClient
from .browser import BrowserManager
from .models import QuestionRecord

logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    """Raised for an unknown session id."""


@dataclass
class QuizSession:
    """
    Everything one quiz run needs: its page, its completion client and
    the questions from the last extraction. ``lock`` serialises page work.
    """
    session_id: str
    page: object
    client: object
    questions: List[QuestionRecord] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class SessionManager:
    """Creates, looks up and tears down quiz sessions in memory."""

    def __init__(self, browser: Optional[BrowserManager] = None):
        self.browser = browser or BrowserManager()
        self._sessions: Dict[str, QuizSession] = {}
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._sessions)

    def _new_id(self) -> str:
        # Millisecond timestamp, bumped when two sessions start in the same ms
        session_id = max(int(time.time() * 1000), self._last_id + 1)
        self._last_id = session_id
        return str(session_id)

    async def start(self, api_key: str) -> QuizSession:
        """Open a fresh page and bind it to a new session."""
        page = await self.browser.create_page()
        session = QuizSession(
            session_id=self._new_id(),
            page=page,
            client=GroqClient(api_key=api_key),
        )
        self._sessions[session.session_id] = session
        logger.info(f"Session {session.session_id} started")
        return session

    def get(self, session_id: str) -> QuizSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None

    async def close(self, session_id: str):
        """Close the session's page and forget it."""
        session = self.get(session_id)
        async with session.lock:
            # A concurrent close may have finished while we waited
            if self._sessions.get(session_id) is not session:
                raise SessionNotFound(session_id)
            await self.browser.close_page(session.page)
            self._sessions.pop(session_id, None)
        logger.info(f"Session {session_id} closed")

    async def close_all(self):
        """Close every session and the shared browser."""
        for session_id in list(self._sessions):
            try:
                await self.close(session_id)
            except Exception as e:
                logger.error(f"Error closing session {session_id}: {e}")
                self._sessions.pop(session_id, None)
        await self.browser.close()
