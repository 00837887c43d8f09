"""
Explicit validation & Pydantic models
- Models are used to validate and serialize/deserialize data
  exchanged between the client and server.
- Defines the structure of API requests and responses.
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, StrictInt, field_validator

from .session import GuessRecord, SessionView
from .types import MAX_DIGIT, MIN_DIGIT

# 1. Body for starting a game
class NewGameRequest(BaseModel):
    mode: Literal["classic", "timed"] = Field("classic", description="classic = 10 attempts, timed = beat the clock")
    time_limit: Optional[int] = Field(
        None, gt=0, description="Seconds allowed in timed mode (server default if omitted)"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"mode": "classic"},
                {"mode": "timed", "time_limit": 60},
            ]
        }
    }

# 2. Validates player's guess
class GuessRequest(BaseModel):
    guess: List[StrictInt] = Field(
        ..., description="4 digits, each between 0 and 7. Plain JSON integers only."
    )

    @field_validator("guess")
    @classmethod
    def validate_digits(cls, guess_list: List[int]) -> List[int]:
        """
        Only the 0..7 range is checked here. The length check belongs to the
        engine, which answers a wrong-sized guess with a 400.
        """
        for digit in guess_list:
            if digit < MIN_DIGIT or digit > MAX_DIGIT:
                raise ValueError("Each digit must be between 0 and 7 inclusive.")
        return guess_list

    model_config = {
        "json_schema_extra": {
            "examples": [
                { "guess": [0, 1, 2, 3] },
            ]
        }
    }

# 3. Describes the feedback for a single guess
class GuessEntryOut(BaseModel):
    id: str = Field(..., description="Unique ID for this guess")
    guess: List[int] = Field(..., description="The player's guess")
    correct_numbers: int = Field(..., description="Right digit, wrong place")
    correct_positions: int = Field(..., description="Right digit, right place")
    message: str = Field(..., description="Feedback message")
    created_at: datetime = Field(..., description="When the guess was accepted (UTC)")

    @classmethod
    def from_record(cls, record: GuessRecord) -> "GuessEntryOut":
        return cls(
            id=record.id,
            guess=list(record.guess),
            correct_numbers=record.correct_numbers,
            correct_positions=record.correct_positions,
            message=record.message,
            created_at=record.created_at,
        )

# 4. Public view of a game; secret is only filled in once the game is over
class GameSummary(BaseModel):
    game_id: str = Field(..., description="Unique ID for the game")
    mode: Literal["classic", "timed"] = Field(..., description="Game mode")
    status: Literal["in_progress", "won", "lost"] = Field(..., description="Current state of the game")
    attempts_left: Optional[int] = Field(None, description="Guesses remaining (classic only)")
    start_time: Optional[datetime] = Field(None, description="When the clock started (timed only)")
    time_limit: Optional[int] = Field(None, description="Seconds allowed (timed only)")
    seconds_left: Optional[int] = Field(None, description="Seconds remaining (timed only)")
    is_win: bool = Field(..., description="True once the code was cracked")
    is_over: bool = Field(..., description="True once no more guesses are accepted")
    secret: Optional[List[int]] = Field(None, description="The secret code (only revealed if game is over)")
    created_at: datetime = Field(..., description="When the game started (UTC)")

    @classmethod
    def from_view(cls, view: SessionView) -> "GameSummary":
        return cls(
            game_id=view.id,
            mode=view.mode,
            status=view.status,
            attempts_left=view.attempts_left,
            start_time=view.start_time,
            time_limit=view.time_limit,
            seconds_left=view.seconds_left,
            is_win=view.is_win,
            is_over=view.is_over,
            secret=list(view.secret) if view.secret is not None else None,
            created_at=view.created_at,
        )

# 5. Game plus its full history
class GameState(GameSummary):
    history: List[GuessEntryOut] = Field(..., description="All guesses made so far with feedback")

    @classmethod
    def build(cls, view: SessionView, history: List[GuessRecord]) -> "GameState":
        summary = GameSummary.from_view(view)
        return cls(**summary.model_dump(), history=[GuessEntryOut.from_record(r) for r in history])

# 6. Result of a guess
class GuessResponse(BaseModel):
    game: GameSummary = Field(..., description="Game after this guess")
    feedback: GuessEntryOut = Field(..., description="Feedback from this guess")
    note: Optional[str] = Field(None, description="Extra note (ex. 'Game lost. No more guesses allowed.')")

# 7. Error body
class ErrorOut(BaseModel):
    error: str = Field(..., description="Stable error code")
    detail: str = Field(..., description="Human readable message")
    game: Optional[GameSummary] = Field(None, description="Game state, when the error changed it")
