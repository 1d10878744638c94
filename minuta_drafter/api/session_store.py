"""In-memory session store with TTL eviction"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import uuid4

from minuta_drafter.models.session import SessionState
from minuta_drafter.services.drafting import DraftingService

logger = logging.getLogger(__name__)


class SessionEntry:
    """A session entry holding the service instance and metadata"""

    def __init__(self, session_id: str, service: DraftingService):
        self.session_id = session_id
        self.service = service
        self.created_at = datetime.now()
        self.last_active = datetime.now()

    @property
    def state(self) -> SessionState:
        return self.service.state

    def touch(self):
        self.last_active = datetime.now()


class SessionStore:
    """Keeps one DraftingService per browser session, in memory only.

    - Sessions idle for longer than the TTL are dropped by evict_expired()
    - When the store is full the least recently active session is dropped
    """

    def __init__(
        self,
        ttl_minutes: int = 30,
        max_sessions: int = 1000,
        service_factory: Optional[Callable[[SessionState], DraftingService]] = None,
    ):
        self._sessions: dict[str, SessionEntry] = {}
        self._ttl = timedelta(minutes=ttl_minutes)
        self._max = max_sessions
        self._lock = asyncio.Lock()
        self._factory = service_factory or (lambda state: DraftingService(state=state))

    def set_service_factory(self, factory: Callable[[SessionState], DraftingService]):
        """Replace how services are built for new sessions (tests inject fake gateways)."""
        self._factory = factory

    def _is_expired(self, entry: SessionEntry, now: datetime) -> bool:
        return (now - entry.last_active) >= self._ttl

    async def create(self, session_id: Optional[str] = None) -> SessionEntry:
        """Create a new session"""
        async with self._lock:
            return self._create(session_id)

    def _create(self, session_id: Optional[str] = None) -> SessionEntry:
        """Create a session (called under lock)"""
        new_id = session_id or str(uuid4())
        if len(self._sessions) >= self._max:
            self._evict_oldest()
        entry = SessionEntry(new_id, self._factory(SessionState(id=new_id)))
        self._sessions[new_id] = entry
        logger.debug(f"Session {new_id} created ({len(self._sessions)} active)")
        return entry

    async def get_or_create(self, session_id: Optional[str] = None) -> SessionEntry:
        """Get existing session or create a new one"""
        async with self._lock:
            if session_id and session_id in self._sessions:
                entry = self._sessions[session_id]
                if not self._is_expired(entry, datetime.now()):
                    entry.touch()
                    return entry
                del self._sessions[session_id]
            return self._create(session_id)

    async def get(self, session_id: str) -> Optional[SessionEntry]:
        """Get session by ID, returns None if not found or expired"""
        async with self._lock:
            entry = self._sessions.get(session_id)
            if entry and not self._is_expired(entry, datetime.now()):
                entry.touch()
                return entry
            return None

    async def delete(self, session_id: str) -> bool:
        """Delete a session; False if it did not exist"""
        async with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def evict_expired(self) -> int:
        """Remove expired sessions"""
        async with self._lock:
            now = datetime.now()
            expired = [
                sid for sid, entry in self._sessions.items()
                if self._is_expired(entry, now)
            ]
            for sid in expired:
                del self._sessions[sid]
            if expired:
                logger.info(f"Evicted {len(expired)} expired sessions")
            return len(expired)

    def _evict_oldest(self):
        """Remove the oldest session to make room (called under lock)"""
        if not self._sessions:
            return
        oldest_id = min(self._sessions, key=lambda sid: self._sessions[sid].last_active)
        del self._sessions[oldest_id]

    @property
    def active_count(self) -> int:
        return len(self._sessions)
