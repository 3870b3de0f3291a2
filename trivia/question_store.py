"""
Question store: an append-only collection of loaded questions with
filtered random selection.
"""
import logging
import random
from typing import Iterator, List, Optional, Set

from .errors import AllocationError, NullArgumentError, RecordParseError
from .models import Difficulty, Question
from .record_parser import iter_records, parse_record


class QuestionStore:
    """Holds parsed questions and draws random questions from them."""

    INITIAL_CAPACITY = 10

    def __init__(
        self,
        initial_capacity: int = INITIAL_CAPACITY,
        max_capacity: Optional[int] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize an empty store.

        Args:
            initial_capacity: Starting capacity, doubled whenever the store is full
            max_capacity: Upper bound on capacity, or None for unbounded
            seed: Seed for the store's random generator
            rng: Random generator to use instead of a freshly seeded one
        """
        if initial_capacity < 1:
            raise ValueError("Initial capacity must be at least 1")
        if max_capacity is not None and max_capacity < initial_capacity:
            raise ValueError("Maximum capacity cannot be below the initial capacity")

        self.logger = logging.getLogger(__name__)
        self._questions: List[Question] = []
        self._capacity = initial_capacity
        self._max_capacity = max_capacity
        # Seeded once for the lifetime of the store
        self._rng = rng if rng is not None else random.Random(seed)
        self.skipped_records = 0

    @property
    def count(self) -> int:
        return len(self._questions)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def questions(self) -> tuple:
        """Snapshot of all stored questions."""
        return tuple(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __getitem__(self, index: int) -> Question:
        return self._questions[index]

    def _grow(self) -> None:
        new_capacity = self._capacity * 2
        if self._max_capacity is not None and new_capacity > self._max_capacity:
            if self._capacity >= self._max_capacity:
                raise AllocationError(
                    f"Question store is full ({self._capacity} questions)"
                )
            new_capacity = self._max_capacity
        self.logger.debug(f"Growing question store capacity {self._capacity} -> {new_capacity}")
        self._capacity = new_capacity

    def add(self, question: Question) -> None:
        """
        Append a question, growing capacity if needed.

        Raises:
            NullArgumentError: If question is None
            AllocationError: If the store cannot grow any further
        """
        if question is None:
            raise NullArgumentError("Cannot add a missing question")
        if self.count >= self._capacity:
            self._grow()
        self._questions.append(question)

    def load_from_source(self, source: str) -> int:
        """
        Parse question records from source text and add them to the store.

        Malformed records are logged and skipped without stopping the scan.

        Args:
            source: Text containing brace-delimited question records

        Returns:
            Number of questions added

        Raises:
            NullArgumentError: If source is None
            RecordParseError: If the source is empty or contains no records
            AllocationError: If the store fills up while loading; questions
                added by this call are removed again before it is raised
        """
        if source is None:
            raise NullArgumentError("Cannot load questions from a missing source")
        if not source.strip():
            raise RecordParseError("Question source is empty")

        loaded = 0
        found = 0
        count_before = self.count
        for record in iter_records(source):
            found += 1
            try:
                question = parse_record(record)
            except RecordParseError as e:
                self.skipped_records += 1
                self.logger.warning(f"Skipping malformed record {found}: {e}")
                continue
            try:
                self.add(question)
            except AllocationError:
                # An aborted load leaves the store as it was
                del self._questions[count_before:]
                self.logger.error(f"Question store full after {loaded} records; load rolled back")
                raise
            loaded += 1

        if found == 0:
            raise RecordParseError("Question source contains no records")

        self.logger.info(f"Loaded {loaded} of {found} question records")
        return loaded

    def get_random_index(
        self,
        difficulty: Optional[Difficulty] = None,
        exclude: Optional[Set[int]] = None,
    ) -> Optional[int]:
        """
        Pick the index of a random question matching the filters.

        Args:
            difficulty: Required difficulty, or None for any
            exclude: Indices that must not be picked

        Returns:
            Index of the chosen question, or None if nothing matches
        """
        candidates = [
            index for index, question in enumerate(self._questions)
            if (difficulty is None or question.difficulty == difficulty)
            and (not exclude or index not in exclude)
        ]
        if not candidates:
            return None
        return self._rng.choice(candidates)

    def get_random(
        self,
        difficulty: Optional[Difficulty] = None,
        exclude: Optional[Set[int]] = None,
    ) -> Optional[Question]:
        """Pick a random question matching the filters, or None if nothing matches."""
        index = self.get_random_index(difficulty, exclude)
        if index is None:
            return None
        return self._questions[index]

    def count_by_difficulty(self, difficulty: Optional[Difficulty]) -> int:
        """Number of questions matching a difficulty filter (None for any)."""
        if difficulty is None:
            return self.count
        return sum(1 for question in self._questions if question.difficulty == difficulty)
