"""
Everything the game can refuse to do.

Each error has a stable `code` so the HTTP layer can turn it into a JSON body
without string matching on messages.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .session import Session


class GameError(Exception):
    code = "game_error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__class__.__doc__ or self.code)

    @property
    def detail(self) -> str:
        return str(self)


class SecretUnavailable(GameError):
    """Could not get a valid secret code."""
    code = "secret_unavailable"


class InvalidGuessShape(GameError):
    """A guess must be exactly 4 integers between 0 and 7."""
    code = "invalid_guess"


class SessionNotFound(GameError):
    """Game not found."""
    code = "not_found"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Game {session_id} not found.")


class SessionAlreadyOver(GameError):
    """Game is over. No more guesses allowed."""
    code = "game_over"


class NoAttemptsRemaining(GameError):
    """No attempts remaining. Game over."""
    code = "no_attempts"


class TimeExpired(GameError):
    """Time is up. Game over."""
    code = "time_expired"

    # The expired snapshot and the time it was noticed travel with the error
    def __init__(self, session: "Session", at: datetime):
        self.session = session
        self.at = at
        super().__init__()
