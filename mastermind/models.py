"""
SQLAlchemy ORM models.

Tables:
- games: one row per game (secret stored as JSON, plus mode fields and flags)
- game_history: one row per accepted guess (append-only)

Why JSON?
- Secret and guesses are small arrays of ints; JSON is simple & clear.
- MySQL (5.7+/8.0+) and SQLite both handle it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String, Integer, DateTime, Enum, Boolean, ForeignKey, JSON,
)
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base
from .types import ModeName
from .session import utcnow


class Game(Base):
    __tablename__ = "games"

    # UUIDs generated in code; stored as strings
    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Secret code (list[int], digits 0..7)
    secret: Mapped[list[int]] = mapped_column(JSON, nullable=False)

    mode: Mapped[ModeName] = mapped_column(
        Enum("classic", "timed", name="game_mode"),
        nullable=False,
        default="classic",
    )

    # classic only
    attempts_left: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # timed only
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    time_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    is_win: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_over: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class GuessRow(Base):
    __tablename__ = "game_history"

    # insertion order; created_at alone can tie
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)

    # Foreign key to games.id
    game_id: Mapped[str] = mapped_column(String(36), ForeignKey("games.id", ondelete="CASCADE"), index=True)

    # The player's guess (list[int])
    guess: Mapped[list[int]] = mapped_column(JSON, nullable=False)

    # Engine output
    correct_numbers: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_positions: Mapped[int] = mapped_column(Integer, nullable=False)
    message: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
