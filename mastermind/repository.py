"""
DB-backed repository that mirrors the in-memory GameStore API.

Public methods:
- add(session) -> None
- get(game_id) -> Session            (SessionNotFound if missing)
- list() -> list[Session]            (newest first)
- locked(game_id) -> Session         (context manager, row lock + one transaction)
- save(session) -> None
- append(record) -> None
- history(game_id) -> list[GuessRecord]

Inside locked() nothing is committed until the block exits cleanly, so the
session update and the history row land together or not at all.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List

from sqlalchemy.orm import Session as DBSession
from sqlalchemy import select

from .errors import SessionNotFound
from .models import Game as GameORM, GuessRow
from .session import ClassicMode, GuessRecord, Mode, Session, TimedMode

# --- Small builders between ORM rows and session values ---

def _to_mode(game: GameORM) -> Mode:
    if game.mode == "timed":
        return TimedMode(start_time=game.start_time, time_limit=game.time_limit)
    return ClassicMode(attempts_left=game.attempts_left)

def _to_session(game: GameORM) -> Session:
    return Session(
        id=game.id,
        secret=tuple(game.secret),
        mode=_to_mode(game),
        is_win=game.is_win,
        is_over=game.is_over,
        created_at=game.created_at,
        updated_at=game.updated_at,
    )

def _to_record(row: GuessRow) -> GuessRecord:
    return GuessRecord(
        id=row.id,
        session_id=row.game_id,
        guess=tuple(row.guess),
        correct_numbers=row.correct_numbers,
        correct_positions=row.correct_positions,
        message=row.message,
        created_at=row.created_at,
    )

def _copy_onto(game: GameORM, session: Session) -> None:
    game.mode = session.mode_name
    game.attempts_left = session.attempts_left
    if isinstance(session.mode, TimedMode):
        game.start_time = session.mode.start_time
        game.time_limit = session.mode.time_limit
    game.is_win = session.is_win
    game.is_over = session.is_over
    game.updated_at = session.updated_at


class DBGameStore:
    """Same API as the in-memory GameStore, backed by SQLAlchemy."""

    def __init__(self, db: DBSession):
        self.db = db
        self._in_transaction = False

    def _commit(self) -> None:
        # locked() commits once on exit
        if not self._in_transaction:
            self.db.commit()

    # --- Public API ---

    def add(self, session: Session) -> None:
        game = GameORM(
            id=session.id,
            secret=list(session.secret),
            created_at=session.created_at,
        )
        _copy_onto(game, session)
        self.db.add(game)
        self._commit()

    def get(self, game_id: str) -> Session:
        game = self.db.get(GameORM, game_id)
        if not game:
            raise SessionNotFound(game_id)
        return _to_session(game)

    def list(self) -> List[Session]:
        games = (
            self.db.execute(select(GameORM).order_by(GameORM.created_at.desc()))
            .scalars()
            .all()
        )
        return [_to_session(g) for g in games]

    @contextmanager
    def locked(self, game_id: str) -> Iterator[Session]:
        # SELECT ... FOR UPDATE; SQLite ignores the lock clause
        game = (
            self.db.execute(select(GameORM).where(GameORM.id == game_id).with_for_update())
            .scalars()
            .first()
        )
        if not game:
            self.db.rollback()
            raise SessionNotFound(game_id)

        self._in_transaction = True
        try:
            yield _to_session(game)
        except BaseException:
            self.db.rollback()
            raise
        else:
            self.db.commit()
        finally:
            self._in_transaction = False

    def save(self, session: Session) -> None:
        game = self.db.get(GameORM, session.id)
        if not game:
            raise SessionNotFound(session.id)
        _copy_onto(game, session)
        self._commit()

    def append(self, record: GuessRecord) -> None:
        self.db.add(GuessRow(
            id=record.id,
            game_id=record.session_id,
            guess=list(record.guess),
            correct_numbers=record.correct_numbers,
            correct_positions=record.correct_positions,
            message=record.message,
            created_at=record.created_at,
        ))
        self._commit()

    def history(self, game_id: str) -> List[GuessRecord]:
        if not self.db.get(GameORM, game_id):
            raise SessionNotFound(game_id)
        rows = (
            self.db.execute(
                select(GuessRow)
                .where(GuessRow.game_id == game_id)
                .order_by(GuessRow.created_at.asc(), GuessRow.seq.asc())
            )
            .scalars()
            .all()
        )
        return [_to_record(r) for r in rows]
