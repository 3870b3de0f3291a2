"""
Turn engine for the trivia game.
Drives a session round by round: draws a question, races the countdown
against keyboard input, scores the answer and rotates players.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .console import ConsoleUI, StdinLineReader
from .errors import NullArgumentError
from .models import Difficulty, GameConfig, Player, Question, SessionStats
from .question_store import QuestionStore
from .timer import CountdownTimer

# Answer outcomes besides a selected option (1-based)
ANSWER_TIMEOUT = 0
ANSWER_QUIT = -1

BASE_POINTS = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 30,
}
DEFAULT_BASE_POINTS = 10


def calculate_score(correct: bool, time_remaining: int, difficulty) -> int:
    """
    Calculate points for an answer.

    A correct answer earns base points by difficulty plus a speed bonus of
    half the remaining seconds (rounded down). Without a timer the caller
    passes the full time limit, so the maximum bonus is awarded.

    Args:
        correct: Whether the answer was correct
        time_remaining: Seconds left on the clock
        difficulty: Difficulty of the question

    Returns:
        Points earned (0 for an incorrect answer)
    """
    if not correct:
        return 0
    base_points = BASE_POINTS.get(difficulty, DEFAULT_BASE_POINTS)
    return base_points + time_remaining // 2


def parse_answer(text: str, option_count: int) -> Optional[int]:
    """
    Interpret a line typed at the answer prompt.

    Returns:
        ANSWER_QUIT for q/Q, the option number if it is within range,
        or None if the input is invalid
    """
    text = text.strip()
    if text[:1] in ("q", "Q"):
        return ANSWER_QUIT
    try:
        answer = int(text)
    except ValueError:
        return None
    if 1 <= answer <= option_count:
        return answer
    return None


@dataclass
class GameReport:
    """Outcome of a finished game session."""
    stats: SessionStats
    players: List[Player] = field(default_factory=list)
    winner: Optional[Player] = None
    is_tie: bool = False
    rounds_played: int = 0
    quit_requested: bool = False
    error: Optional[str] = None

    @property
    def final_score(self) -> int:
        if self.players:
            return max(player.score for player in self.players)
        return self.stats.score


class GameSession:
    """
    Runs one complete game from the first question to the final statistics.

    The session borrows the question store read-only. Players, statistics and
    the countdown timer belong to the session and are released by cleanup().
    """

    def __init__(
        self,
        store: QuestionStore,
        config: GameConfig,
        ui: Optional[ConsoleUI] = None,
        reader=None,
        timer_tick: float = 1.0,
        pause_between_rounds: bool = False,
    ):
        """
        Initialize a game session.

        Args:
            store: Loaded questions to draw from
            config: Session configuration
            ui: Renderer for questions and results
            reader: Line reader with an async readline() returning None at EOF
            timer_tick: Length of one countdown unit in seconds
            pause_between_rounds: Wait for Enter after each round

        Raises:
            NullArgumentError: If store or config is missing
        """
        if store is None:
            raise NullArgumentError("Game session requires a question store")
        if config is None:
            raise NullArgumentError("Game session requires a game configuration")

        self.logger = logging.getLogger(__name__)
        self.store = store
        self.config = config
        self.ui = ui if ui is not None else ConsoleUI()
        self.reader = reader if reader is not None else StdinLineReader()
        self.pause_between_rounds = pause_between_rounds

        self.stats = SessionStats()
        self.players: List[Player] = []
        if config.is_multiplayer:
            self.players = [Player(f"Player {i + 1}") for i in range(config.num_players)]
        self.current_player_index = 0

        self.timer: Optional[CountdownTimer] = None
        if config.use_timer:
            self.timer = CountdownTimer(
                config.time_per_question, tick=timer_tick, on_tick=self.ui.show_timer
            )

        self.is_active = False
        self.quit_requested = False
        self.last_error: Optional[str] = None
        self.rounds_played = 0
        self._seen: Set[int] = set()

        self.logger.info(
            f"Game session initialized: players={config.num_players}, "
            f"rounds={config.total_rounds}, timer={config.use_timer}"
        )

    def set_player_names(self, names: List[str]) -> None:
        """Assign display names; blank entries keep the default name."""
        for index, player in enumerate(self.players):
            if index < len(names) and names[index] and names[index].strip():
                player.name = names[index].strip()
            else:
                player.name = f"Player {index + 1}"

    @property
    def current_player(self) -> Optional[Player]:
        """Player whose turn it is, or None in single-player mode."""
        if not self.players:
            return None
        return self.players[self.current_player_index]

    def next_player(self) -> None:
        """Advance to the next player in strict round-robin order."""
        if not self.players:
            return
        self.current_player_index = (self.current_player_index + 1) % len(self.players)

    async def _collect_answer(self, option_count: int) -> int:
        # Re-prompts until a valid answer or quit arrives
        while True:
            line = await self.reader.readline()
            if line is None:
                return ANSWER_QUIT
            answer = parse_answer(line, option_count)
            if answer is not None:
                return answer
            self.ui.show_invalid_answer(option_count)

    async def ask_question(self, question: Question, round_number: int = 1) -> int:
        """
        Present a question and wait for an answer.

        With the timer enabled, input is collected until a valid answer or
        quit arrives or the countdown expires, whichever happens first. The
        timer is fully stopped before this method returns.

        Returns:
            The selected option (1-based), ANSWER_TIMEOUT or ANSWER_QUIT
        """
        if question is None:
            raise NullArgumentError("Cannot ask a missing question")

        player = self.current_player
        self.ui.show_question(
            question,
            round_number,
            self.config.total_rounds,
            player.name if player else None,
        )

        if self.timer is None:
            self.ui.show_answer_prompt(question.option_count)
            line = await self.reader.readline()
            if line is None:
                return ANSWER_QUIT
            answer = parse_answer(line, question.option_count)
            return ANSWER_TIMEOUT if answer is None else answer

        await self.timer.reset(self.config.time_per_question)
        self.timer.start()
        self.ui.show_answer_prompt(question.option_count, self.config.time_per_question)

        collect = asyncio.ensure_future(self._collect_answer(question.option_count))
        expiry = asyncio.ensure_future(self.timer.wait())
        try:
            await asyncio.wait({collect, expiry}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (collect, expiry):
                if not task.done():
                    task.cancel()
            await asyncio.gather(collect, expiry, return_exceptions=True)
            await self.timer.stop()

        # An answer that arrived together with the expiry still counts
        if collect.done() and not collect.cancelled():
            return collect.result()

        self.ui.show_time_up()
        return ANSWER_TIMEOUT

    def _draw_question(self) -> Optional[Question]:
        exclude = self._seen if self.config.avoid_repeats else None
        index = self.store.get_random_index(self.config.difficulty, exclude)
        if index is None:
            return None
        if self.config.avoid_repeats:
            self._seen.add(index)
        return self.store[index]

    def _score_round(self, question: Question, answer: int) -> int:
        """Update the acting player's (or session) counters and return points earned."""
        correct = answer == question.correct_index + 1
        if self.timer is not None:
            time_remaining = self.timer.get_remaining()
        else:
            time_remaining = self.config.time_per_question

        tally = self.current_player if self.players else self.stats
        if not self.players:
            self.stats.total_questions += 1

        points = 0
        if answer == ANSWER_TIMEOUT:
            tally.timeouts += 1
            self.ui.show_wrong(question, timed_out=True)
        elif correct:
            points = calculate_score(True, time_remaining, question.difficulty)
            tally.correct_answers += 1
            tally.score += points
            self.ui.show_correct(points)
        else:
            tally.wrong_answers += 1
            self.ui.show_wrong(question)
        return points

    async def _wait_for_enter(self) -> None:
        if self.pause_between_rounds:
            self.ui.show_continue_prompt()
            await self.reader.readline()

    async def run_session(self) -> int:
        """
        Play every round of the session, then show the final statistics.

        The loop ends early when the player quits or no question matches the
        configured difficulty.

        Returns:
            Final score. In multiplayer this is the highest player score, not
            stats.score, which stays 0 because points go to each Player instead.
        """
        self.is_active = True
        self.ui.show_game_intro(self.config)
        await self._wait_for_enter()

        try:
            for round_number in range(1, self.config.total_rounds + 1):
                question = self._draw_question()
                if question is None:
                    self.last_error = "No questions available"
                    self.logger.error(
                        f"No questions available for difficulty filter {self.config.difficulty!r} "
                        f"in round {round_number}"
                    )
                    self.ui.show_error(self.last_error)
                    break

                answer = await self.ask_question(question, round_number)
                if answer == ANSWER_QUIT:
                    self.quit_requested = True
                    self.logger.info(f"Game quit by user in round {round_number}")
                    self.ui.show_quit()
                    break

                self._score_round(question, answer)
                self.rounds_played += 1

                if self.players:
                    self.ui.show_scores(self.players)

                await self._wait_for_enter()
                self.next_player()
        finally:
            self.is_active = False

        report = self.display_stats()
        self.logger.info(
            f"Game session finished: rounds={self.rounds_played}, "
            f"final_score={report.final_score}, quit={self.quit_requested}"
        )
        return report.final_score

    def build_report(self) -> GameReport:
        """Summarize the session, determining the winner or a tie."""
        report = GameReport(
            stats=self.stats,
            players=list(self.players),
            rounds_played=self.rounds_played,
            quit_requested=self.quit_requested,
            error=self.last_error,
        )
        if self.players:
            max_score = max(player.score for player in self.players)
            leaders = [player for player in self.players if player.score == max_score]
            if len(leaders) > 1:
                report.is_tie = True
            else:
                report.winner = leaders[0]
        return report

    def display_stats(self) -> GameReport:
        """Render the final statistics and return the report they came from."""
        report = self.build_report()
        self.ui.show_stats(report)
        return report

    async def cleanup(self) -> None:
        """Stop the timer and release per-session state."""
        if self.timer is not None:
            await self.timer.stop()
            self.timer = None
        self.players = []
        self.is_active = False
        self.logger.debug("Game session cleaned up")
