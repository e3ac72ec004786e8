"""
In-memory store of chat sessions.

The transport layer owns session identity; this store hands out the
ConversationSession for an id, creating it on first use, and evicts sessions
that have been idle longer than the configured TTL.
"""

from datetime import datetime, timedelta
from typing import Dict, Optional
import threading

from support_assistant.domain.models.conversation import ConversationSession
from support_assistant.utils.logger import get_logger

WELCOME_MESSAGE = "¡Bienvenido al Chat de Soporte! ¿En qué puedo ayudarte hoy?"


class SessionStore:
    """Thread-safe registry of conversation sessions."""

    def __init__(self, ttl_seconds: int = 3600, welcome_message: Optional[str] = WELCOME_MESSAGE):
        """
        Initialize the session store.

        Args:
            ttl_seconds: Idle time after which a session is evicted (0 disables eviction)
            welcome_message: First bot message of every new session
        """
        self.ttl_seconds = ttl_seconds
        self.welcome_message = welcome_message
        self._sessions: Dict[str, ConversationSession] = {}
        self._lock = threading.RLock()
        self.logger = get_logger(__name__)

    def get_or_create(self, session_id: str) -> ConversationSession:
        """
        Get a session, creating it if it does not exist or has expired.

        Args:
            session_id: Session identifier

        Returns:
            The live session
        """
        with self._lock:
            self._evict_expired()
            session = self._sessions.get(session_id)
            if session is None:
                session = ConversationSession(session_id, self.welcome_message)
                self._sessions[session_id] = session
                self.logger.debug(f"Created chat session: {session_id}")
            return session

    def get(self, session_id: str) -> Optional[ConversationSession]:
        with self._lock:
            self._evict_expired()
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _evict_expired(self) -> None:
        if self.ttl_seconds <= 0:
            return
        cutoff = datetime.utcnow() - timedelta(seconds=self.ttl_seconds)
        expired = [sid for sid, s in self._sessions.items() if s.last_activity < cutoff]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            self.logger.info(f"Evicted {len(expired)} idle chat sessions")
