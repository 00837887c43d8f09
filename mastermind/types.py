"""
Labels for clarity.
"""

from typing import Literal, Tuple

CODE_LENGTH = 4
MIN_DIGIT = 0
MAX_DIGIT = 7

Digit = int  # 0 -> 7
Code = Tuple[Digit, ...]  # always CODE_LENGTH digits once validated
ModeName = Literal["classic", "timed"]
GameStatus = Literal["in_progress", "won", "lost"]
