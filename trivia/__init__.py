"""
Terminal Trivia Game

A terminal quiz for one to four local players with a per-question countdown.
"""

from .models import (
    Category,
    Difficulty,
    GameConfig,
    GameSettings,
    Player,
    Question,
    SessionStats,
    category_name,
    difficulty_name,
)
from .errors import (
    AllocationError,
    NullArgumentError,
    RecordParseError,
    SourceUnavailableError,
    TimerError,
    TriviaError,
)
from .question_store import QuestionStore
from .timer import CountdownTimer, TimerState
from .engine import ANSWER_QUIT, ANSWER_TIMEOUT, GameReport, GameSession, calculate_score

__version__ = "1.0.0"
__all__ = [
    # Data model
    "Category",
    "Difficulty",
    "GameConfig",
    "GameSettings",
    "Player",
    "Question",
    "SessionStats",
    "category_name",
    "difficulty_name",
    # Errors
    "AllocationError",
    "NullArgumentError",
    "RecordParseError",
    "SourceUnavailableError",
    "TimerError",
    "TriviaError",
    # Core components
    "QuestionStore",
    "CountdownTimer",
    "TimerState",
    "GameSession",
    "GameReport",
    "calculate_score",
    "ANSWER_QUIT",
    "ANSWER_TIMEOUT",
]
