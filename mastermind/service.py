"""
Game service: the four things a caller can do with a game.

- create_session(mode, time_limit=None)
- submit_guess(session_id, guess)
- expire_session(session_id)
- get_history(session_id) / get_state(session_id) / list_sessions()

The rules themselves live in engine.py; this class wires them to a secret
supplier, a store (memory or DB) and a clock. Results are SessionView values,
so the secret never leaves while a game is running.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, ContextManager, List, Optional, Protocol, Sequence, Tuple

from . import engine
from .config import config
from .errors import SecretUnavailable, TimeExpired
from .session import GuessRecord, Session, SessionView, utcnow
from .types import ModeName

logger = logging.getLogger(__name__)

SecretSupplier = Callable[[], Sequence[int]]
Clock = Callable[[], datetime]


class Store(Protocol):
    def add(self, session: Session) -> None: ...
    def get(self, session_id: str) -> Session: ...
    def list(self) -> List[Session]: ...
    def locked(self, session_id: str) -> ContextManager[Session]: ...
    def save(self, session: Session) -> None: ...
    def append(self, record: GuessRecord) -> None: ...
    def history(self, session_id: str) -> List[GuessRecord]: ...


@dataclass(frozen=True)
class GameSnapshot:
    session: SessionView
    history: List[GuessRecord]


class GameService:
    def __init__(
        self,
        store: Store,
        supplier: SecretSupplier,
        clock: Clock = utcnow,
        attempts: Optional[int] = None,
        default_time_limit: Optional[int] = None,
    ):
        self.store = store
        self.supplier = supplier
        self.clock = clock
        self.attempts = attempts if attempts is not None else config.CLASSIC_ATTEMPTS
        self.default_time_limit = default_time_limit if default_time_limit is not None else config.TIMED_LIMIT_SECONDS

    def _fetch_secret(self) -> Sequence[int]:
        # No retry here; callers decide
        try:
            return self.supplier()
        except SecretUnavailable:
            raise
        except Exception as exc:
            logger.warning("Secret supplier failed: %s", exc)
            raise SecretUnavailable() from exc

    def create_session(self, mode: ModeName = "classic", time_limit: Optional[int] = None) -> SessionView:
        raw = self._fetch_secret()
        now = self.clock()
        session = engine.new_session(
            raw,
            mode,
            now,
            attempts=self.attempts,
            time_limit=self.default_time_limit if time_limit is None else time_limit,
        )
        self.store.add(session)
        logger.info("Game %s started (%s)", session.id, session.mode_name)
        return session.view(now)

    def submit_guess(self, session_id: str, guess: object) -> Tuple[SessionView, GuessRecord]:
        expired: Optional[TimeExpired] = None
        with self.store.locked(session_id) as current:
            now = self.clock()
            try:
                updated, record = engine.submit_guess(current, guess, now)
            except TimeExpired as exc:
                # Lazy expiry: the flip to over is kept even though the call fails
                self.store.save(exc.session)
                expired = exc
            else:
                self.store.save(updated)
                self.store.append(record)
        if expired is not None:
            raise expired

        logger.info(
            "Game %s guess %s -> %d position(s), %d number(s), attempts left: %s",
            session_id, list(record.guess), record.correct_positions, record.correct_numbers,
            updated.attempts_left,
        )
        return updated.view(now), record

    def expire_session(self, session_id: str) -> SessionView:
        with self.store.locked(session_id) as current:
            now = self.clock()
            updated = engine.expire_session(current, now)
            if updated is not current:
                self.store.save(updated)
                logger.info("Game %s expired", session_id)
        return updated.view(now)

    def get_history(self, session_id: str) -> List[GuessRecord]:
        return self.store.history(session_id)

    def get_state(self, session_id: str) -> GameSnapshot:
        session = self.store.get(session_id)
        return GameSnapshot(
            session=session.view(self.clock()),
            history=self.store.history(session_id),
        )

    def list_sessions(self) -> List[SessionView]:
        now = self.clock()
        return [s.view(now) for s in self.store.list()]
