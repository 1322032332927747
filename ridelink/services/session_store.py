"""Storage for bearer sessions."""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional

from ridelink.models import Session
from ridelink.storage.base import PersistenceGateway
from ridelink.storage.repositories import SessionRepository


class SessionStore(ABC):
    """Maps token identifiers to sessions."""

    @abstractmethod
    def put(self, session: Session) -> None:
        pass

    @abstractmethod
    def get(self, session_id: str) -> Optional[Session]:
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        pass

    @abstractmethod
    def purge_expired(self, now: datetime) -> int:
        """Drop expired sessions. Returns how many were removed."""


class InMemorySessionStore(SessionStore):
    """Sessions of a single process, guarded by a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, Session] = {}

    def put(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.id] = session

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [key for key, session in self._sessions.items() if session.is_expired(now)]
            for key in expired:
                del self._sessions[key]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class GatewaySessionStore(SessionStore):
    """Sessions kept in the shared store, visible to every process using it."""

    def __init__(self, gateway: PersistenceGateway):
        self.sessions = SessionRepository(gateway)

    def put(self, session: Session) -> None:
        self.sessions.save(session)

    def get(self, session_id: str) -> Optional[Session]:
        return self.sessions.find_by_id(session_id)

    def delete(self, session_id: str) -> bool:
        return self.sessions.delete_by_id(session_id)

    def purge_expired(self, now: datetime) -> int:
        removed = 0
        for session in self.sessions.find_all():
            # Another process may have removed it first
            if session.is_expired(now) and self.sessions.delete_by_id(session.id):
                removed += 1
        return removed
