"""
Pure game logic (no HTTP, no storage).

We compute two feedback numbers for each guess:
- correct_positions: how many indices are exactly correct (right number, right place)
- correct_numbers: digits that are in the secret but somewhere else
  (exact matches are taken out first, so they are never counted twice)

We allow duplicates in the secret and in the guess.

The rest of this module is the session state machine. Every function takes a
Session value and returns a new one; storage and locking live elsewhere.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import NamedTuple, Optional, Sequence, Tuple, Type
from uuid import uuid4

from .errors import (
    GameError,
    InvalidGuessShape,
    NoAttemptsRemaining,
    SecretUnavailable,
    SessionAlreadyOver,
    TimeExpired,
)
from .session import ClassicMode, GuessRecord, Mode, Session, TimedMode
from .types import CODE_LENGTH, MAX_DIGIT, MIN_DIGIT, Code

logger = logging.getLogger(__name__)

# Marks a digit as already matched; outside 0..7 so it can never match again
_USED = -1


class Score(NamedTuple):
    correct_numbers: int
    correct_positions: int


def score_guess(secret: Code, guess: Code) -> Score:
    """
    Example:
      secret = [1, 1, 2, 3]
      guess  = [1, 1, 1, 4]
      correct_positions = 2  (both leading 1s)
      correct_numbers   = 0  (the third 1 has no unused 1 left in the secret)
      Returns a Score: (correct_numbers, correct_positions)
    """

    # 0, Validate lengths match
    n = len(secret)
    if n == 0 or len(guess) != n:
        raise ValueError("Secret and guess must be the same non-zero length.")

    secret_left = list(secret)
    guess_left = list(guess)

    # 1. Exact matches --> correct_positions, then take both digits out
    correct_positions = 0
    i = 0
    while i < n:
        if secret_left[i] == guess_left[i]:
            correct_positions += 1
            secret_left[i] = _USED
            guess_left[i] = _USED
        i += 1

    # 2. Remaining guess digits: first unused match in the secret --> correct_numbers
    correct_numbers = 0
    for digit in guess_left:
        if digit == _USED:
            continue
        if digit in secret_left:
            correct_numbers += 1
            secret_left[secret_left.index(digit)] = _USED

    return Score(correct_numbers, correct_positions)


def is_win(score: Score) -> bool:
    """
    Win = all digits match in order, for all positions.
    """
    return score.correct_positions == CODE_LENGTH


def feedback_message(score: Score) -> str:
    # Say how close the guess was without saying which digits
    if score.correct_numbers == 0 and score.correct_positions == 0:
        return "all incorrect"
    return (
        f"{score.correct_numbers} correct number(s) and "
        f"{score.correct_positions} correct location(s)"
    )


def _to_code(value: object, error: Type[GameError]) -> Code:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise error()
    if len(value) != CODE_LENGTH:
        raise error()
    digits = []
    for digit in value:
        # bool is an int subclass; True is not a digit
        if isinstance(digit, bool) or not isinstance(digit, int):
            raise error()
        if digit < MIN_DIGIT or digit > MAX_DIGIT:
            raise error()
        digits.append(digit)
    return tuple(digits)


def validate_guess(guess: object) -> Code:
    return _to_code(guess, InvalidGuessShape)


def validate_secret(raw: object) -> Code:
    return _to_code(raw, SecretUnavailable)


# ---------------- State machine ----------------

def new_session(
    raw_secret: object,
    mode: str,
    now: datetime,
    attempts: int = 10,
    time_limit: Optional[int] = None,
    session_id: Optional[str] = None,
) -> Session:
    """
    Active(mode) right away.
      classic -> attempts_left = attempts
      timed   -> start_time = now, time_limit = time_limit
    Raises SecretUnavailable if the supplier's output is not a valid code.
    """
    secret = validate_secret(raw_secret)

    game_mode: Mode
    if mode == "classic":
        if attempts <= 0:
            raise ValueError("attempts must be positive.")
        game_mode = ClassicMode(attempts_left=attempts)
    elif mode == "timed":
        if time_limit is None or time_limit <= 0:
            raise ValueError("time_limit must be a positive number of seconds.")
        game_mode = TimedMode(start_time=now, time_limit=time_limit)
    else:
        raise ValueError(f"Unknown mode: {mode!r}")

    return Session(
        id=session_id or str(uuid4()),
        secret=secret,
        mode=game_mode,
        created_at=now,
        updated_at=now,
    )


def submit_guess(session: Session, guess: object, now: datetime) -> Tuple[Session, GuessRecord]:
    """
    Score one guess. Gates, in order:
      1. timed and past the limit -> session flips to over, TimeExpired (carries it)
      2. classic and no attempts  -> NoAttemptsRemaining
      3. already over             -> SessionAlreadyOver
    Returns the new session and the history record to append.
    """
    attempt = validate_guess(guess)

    mode = session.mode
    if isinstance(mode, TimedMode):
        if mode.is_expired(now):
            expired = expire_session(session, now)
            logger.info("Game %s ran out of time (%.1fs > %ss)", session.id, mode.elapsed(now), mode.time_limit)
            raise TimeExpired(expired, now)
    elif isinstance(mode, ClassicMode):
        if mode.attempts_left <= 0:
            raise NoAttemptsRemaining()

    if session.is_over:
        raise SessionAlreadyOver()

    score = score_guess(session.secret, attempt)
    record = GuessRecord(
        id=str(uuid4()),
        session_id=session.id,
        guess=attempt,
        correct_numbers=score.correct_numbers,
        correct_positions=score.correct_positions,
        message=feedback_message(score),
        created_at=now,
    )

    if isinstance(mode, ClassicMode):
        mode = mode.spend_attempt()

    won = is_win(score)
    over = won or (isinstance(mode, ClassicMode) and mode.attempts_left <= 0)

    updated = replace(session, mode=mode, is_win=won, is_over=over, updated_at=now)
    if won:
        logger.info("Game %s won", session.id)
    elif over:
        logger.info("Game %s lost: out of attempts", session.id)
    return updated, record


def expire_session(session: Session, now: datetime) -> Session:
    """Idempotent: an over session comes back untouched."""
    if session.is_over:
        return session
    return replace(session, is_over=True, updated_at=now)
