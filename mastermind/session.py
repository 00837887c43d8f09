"""
Session state: the immutable values the engine works on.

- Session: one game (secret, mode, win/over flags, timestamps)
- ClassicMode / TimedMode: what limits the game (attempts vs. clock)
- GuessRecord: one accepted guess and its score (history entry)
- SessionView: what callers are allowed to see; the secret only shows up
  here once the game is over.

Nothing in here is mutated. Every engine step returns a new Session via
dataclasses.replace().
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import ClassVar, Optional, Union

from .types import Code, GameStatus, ModeName


def utcnow() -> datetime:
    # Naive UTC, same as what the DateTime columns hand back
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class ClassicMode:
    attempts_left: int
    name: ClassVar[ModeName] = "classic"

    def spend_attempt(self) -> "ClassicMode":
        return replace(self, attempts_left=self.attempts_left - 1)


@dataclass(frozen=True)
class TimedMode:
    start_time: datetime
    time_limit: int  # seconds
    name: ClassVar[ModeName] = "timed"

    def elapsed(self, now: datetime) -> float:
        return (now - self.start_time).total_seconds()

    def is_expired(self, now: datetime) -> bool:
        # Strictly greater: a guess at exactly time_limit still counts
        return self.elapsed(now) > self.time_limit

    def seconds_left(self, now: datetime) -> int:
        return max(0, int(self.time_limit - self.elapsed(now)))


Mode = Union[ClassicMode, TimedMode]


@dataclass(frozen=True)
class Session:
    id: str
    secret: Code = field(repr=False)
    mode: Mode
    is_win: bool = False
    is_over: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def mode_name(self) -> ModeName:
        return self.mode.name

    @property
    def attempts_left(self) -> Optional[int]:
        if isinstance(self.mode, ClassicMode):
            return self.mode.attempts_left
        return None

    @property
    def status(self) -> GameStatus:
        if not self.is_over:
            return "in_progress"
        return "won" if self.is_win else "lost"

    def reveal_secret_if_over(self) -> Optional[Code]:
        """The only way the secret leaves a Session."""
        if self.is_over:
            return tuple(self.secret)
        return None

    def view(self, now: Optional[datetime] = None) -> "SessionView":
        now = now or utcnow()
        start_time = time_limit = seconds_left = None
        if isinstance(self.mode, TimedMode):
            start_time = self.mode.start_time
            time_limit = self.mode.time_limit
            seconds_left = 0 if self.is_over else self.mode.seconds_left(now)
        return SessionView(
            id=self.id,
            mode=self.mode_name,
            status=self.status,
            attempts_left=self.attempts_left,
            start_time=start_time,
            time_limit=time_limit,
            seconds_left=seconds_left,
            is_win=self.is_win,
            is_over=self.is_over,
            secret=self.reveal_secret_if_over(),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(frozen=True)
class GuessRecord:
    id: str
    session_id: str
    guess: Code
    correct_numbers: int
    correct_positions: int
    message: str
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class SessionView:
    id: str
    mode: ModeName
    status: GameStatus
    attempts_left: Optional[int]
    start_time: Optional[datetime]
    time_limit: Optional[int]
    seconds_left: Optional[int]
    is_win: bool
    is_over: bool
    secret: Optional[Code]
    created_at: datetime
    updated_at: datetime
