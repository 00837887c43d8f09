"""
In-memory store
Holds sessions and their guess history in memory.

Same public methods as the DB repository, so the service does not care which
one it gets:
- add(session) / get(id) / save(session) / list()
- locked(id) -> context manager giving exclusive access to one session
- append(record) / history(id)
"""

from contextlib import contextmanager
from threading import RLock
from typing import Dict, Iterator, List

from .errors import SessionNotFound
from .session import GuessRecord, Session


class GameStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._history: Dict[str, List[GuessRecord]] = {}
        # one lock per session id; _lock guards the dicts themselves
        self._locks: Dict[str, RLock] = {}
        self._lock = RLock()

    def add(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.id] = session
            self._history[session.id] = []
            self._locks[session.id] = RLock()

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def list(self) -> List[Session]:
        with self._lock:
            sessions = list(self._sessions.values())
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    @contextmanager
    def locked(self, session_id: str) -> Iterator[Session]:
        with self._lock:
            session_lock = self._locks.get(session_id)
        if session_lock is None:
            raise SessionNotFound(session_id)
        with session_lock:
            yield self._sessions[session_id]

    def save(self, session: Session) -> None:
        with self._lock:
            if session.id not in self._sessions:
                raise SessionNotFound(session.id)
            self._sessions[session.id] = session

    def append(self, record: GuessRecord) -> None:
        with self._lock:
            if record.session_id not in self._history:
                raise SessionNotFound(record.session_id)
            self._history[record.session_id].append(record)

    def history(self, session_id: str) -> List[GuessRecord]:
        with self._lock:
            records = self._history.get(session_id)
            if records is None:
                raise SessionNotFound(session_id)
            # copy so callers can't reach into the ledger
            return list(records)
