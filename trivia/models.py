"""
Core data models for the terminal trivia game.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple


# Storage limits for text fields; longer values are truncated silently
MAX_QUESTION_LEN = 511
MAX_OPTION_LEN = 255
MAX_OPTIONS = 4

MIN_PLAYERS = 1
MAX_PLAYERS = 4


class Difficulty(IntEnum):
    """Difficulty levels for questions."""
    EASY = 0
    MEDIUM = 1
    HARD = 2


class Category(IntEnum):
    """Question categories."""
    GENERAL = 0
    SCIENCE = 1
    HISTORY = 2
    SPORTS = 3
    ENTERTAINMENT = 4


_DIFFICULTY_NAMES = {
    Difficulty.EASY: "Easy",
    Difficulty.MEDIUM: "Medium",
    Difficulty.HARD: "Hard",
}

_CATEGORY_NAMES = {
    Category.GENERAL: "General",
    Category.SCIENCE: "Science",
    Category.HISTORY: "History",
    Category.SPORTS: "Sports",
    Category.ENTERTAINMENT: "Entertainment",
}


def difficulty_name(difficulty) -> str:
    """Get the display name of a difficulty, or "Unknown"."""
    if isinstance(difficulty, bool):
        return "Unknown"
    return _DIFFICULTY_NAMES.get(difficulty, "Unknown")


def category_name(category) -> str:
    """Get the display name of a category, or "Unknown"."""
    if isinstance(category, bool):
        return "Unknown"
    return _CATEGORY_NAMES.get(category, "Unknown")


@dataclass(frozen=True)
class Question:
    """Represents a single multiple-choice trivia question."""
    text: str
    options: Tuple[str, ...]
    correct_index: int
    difficulty: Difficulty = Difficulty.EASY
    category: Category = Category.GENERAL

    def __post_init__(self):
        # Accept any sequence of options but store an immutable tuple
        object.__setattr__(self, "options", tuple(self.options))
        if not self.options:
            raise ValueError("Question must have at least one option")
        if len(self.options) > MAX_OPTIONS:
            raise ValueError(f"Question cannot have more than {MAX_OPTIONS} options")
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(
                f"Correct index {self.correct_index} out of range for {len(self.options)} options"
            )

    @property
    def option_count(self) -> int:
        return len(self.options)

    @property
    def correct_option(self) -> str:
        """Text of the correct option."""
        return self.options[self.correct_index]


@dataclass
class GameSettings:
    """Configurable defaults that game sessions are built from."""
    questions_per_game: int = 5
    time_per_question: int = 30
    use_timer: bool = True
    avoid_repeats: bool = False
    pause_between_rounds: bool = True
    random_seed: Optional[int] = None


@dataclass(frozen=True)
class GameConfig:
    """Immutable configuration of a single game session."""
    questions_per_game: int = 5
    time_per_question: int = 30
    difficulty: Optional[Difficulty] = None  # None means any difficulty
    use_timer: bool = True
    num_players: int = 1
    avoid_repeats: bool = False

    def __post_init__(self):
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}"
            )
        if self.questions_per_game < 1:
            raise ValueError("Questions per game must be at least 1")
        if self.time_per_question < 1:
            raise ValueError("Time per question must be at least 1 second")

    @property
    def is_multiplayer(self) -> bool:
        return self.num_players > 1

    @property
    def total_rounds(self) -> int:
        """Number of rounds: every player gets questions_per_game questions."""
        return self.questions_per_game * max(1, self.num_players)


@dataclass
class Player:
    """A participant in a multiplayer session."""
    name: str
    score: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0
    timeouts: int = 0

    @property
    def answered(self) -> int:
        return self.correct_answers + self.wrong_answers

    @property
    def accuracy(self) -> float:
        """Percentage of answered questions that were correct."""
        if self.answered == 0:
            return 0.0
        return self.correct_answers / self.answered * 100.0


@dataclass
class SessionStats:
    """Statistics for a single-player session."""
    total_questions: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0
    timeouts: int = 0
    score: int = 0

    @property
    def accuracy(self) -> float:
        """Percentage of all asked questions that were answered correctly."""
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions * 100.0
