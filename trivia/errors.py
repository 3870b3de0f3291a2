"""
Exception hierarchy for the terminal trivia game.
"""


class TriviaError(Exception):
    """Base exception for trivia game errors."""
    pass


class NullArgumentError(TriviaError):
    """Raised when a required argument is missing."""
    pass


class AllocationError(TriviaError):
    """Raised when the question store cannot grow any further."""
    pass


class RecordParseError(TriviaError):
    """Raised when a question record (or a whole source) cannot be parsed."""
    pass


class SourceUnavailableError(TriviaError):
    """Raised when the question source is missing or unreadable."""
    pass


class TimerError(TriviaError):
    """Raised when a timer operation is invalid for the timer's state."""
    pass
