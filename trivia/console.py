"""
Terminal user interface for the trivia game.

Rendering goes through ConsoleUI; keyboard input goes through a line reader
whose readline() coroutine can be cancelled without consuming input.
"""
import asyncio
import logging
import os
import sys
from typing import List, Optional, TextIO

from colorama import Fore, Style

from .models import GameConfig, Player, Question, difficulty_name

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 55


class Colors:
    """Color definitions for terminal output."""

    HEADER = Fore.CYAN + Style.BRIGHT
    SUCCESS = Fore.GREEN + Style.BRIGHT
    ERROR = Fore.RED + Style.BRIGHT
    WARNING = Fore.YELLOW + Style.BRIGHT
    INFO = Fore.BLUE + Style.BRIGHT

    QUESTION = Fore.WHITE + Style.BRIGHT
    OPTION = Fore.MAGENTA
    PLAYER = Fore.CYAN

    RESET = Style.RESET_ALL


class StdinLineReader:
    """
    Reads lines from standard input without blocking the event loop.

    Each readline() call registers a reader for the input file descriptor
    only while it waits, so a cancelled call leaves unread input in place.
    Input that cannot be polled is handled too: a regular file (redirected
    stdin) is read directly, and on loops without add_reader (the Windows
    proactor loop) reads run in the default executor. A read that is still
    running in the executor when readline() is cancelled is picked up by the
    next call, so its data is not lost.
    """

    CHUNK_SIZE = 4096

    def __init__(self, stream: Optional[TextIO] = None, encoding: str = "utf-8"):
        self._stream = stream if stream is not None else sys.stdin
        self._encoding = encoding
        self._buffer = b""
        self._eof = False
        self._use_executor = False
        self._pending: Optional[asyncio.Future] = None

    def _pop_line(self) -> Optional[str]:
        newline = self._buffer.find(b"\n")
        if newline == -1:
            if self._eof and self._buffer:
                line, self._buffer = self._buffer, b""
                return line.decode(self._encoding, errors="replace")
            return None
        line, self._buffer = self._buffer[:newline], self._buffer[newline + 1:]
        return line.decode(self._encoding, errors="replace").rstrip("\r")

    async def _read_chunk(self, loop: asyncio.AbstractEventLoop, fd: int) -> bytes:
        if self._pending is None and not self._use_executor:
            readable = loop.create_future()

            def on_readable():
                if not readable.done():
                    readable.set_result(None)

            try:
                loop.add_reader(fd, on_readable)
            except PermissionError:
                # Regular files cannot be polled and never block
                return os.read(fd, self.CHUNK_SIZE)
            except NotImplementedError:
                logger.debug("Event loop cannot poll input; reading in the executor")
                self._use_executor = True
            else:
                try:
                    await readable
                finally:
                    loop.remove_reader(fd)
                return os.read(fd, self.CHUNK_SIZE)

        if self._pending is None:
            self._pending = loop.run_in_executor(None, os.read, fd, self.CHUNK_SIZE)
        try:
            chunk = await asyncio.shield(self._pending)
        except OSError:
            self._pending = None
            raise
        self._pending = None
        return chunk

    async def readline(self) -> Optional[str]:
        """
        Read one line of input without its line ending.

        Returns:
            The line, or None at end of input
        """
        loop = asyncio.get_running_loop()
        fd = self._stream.fileno()

        while True:
            line = self._pop_line()
            if line is not None:
                return line
            if self._eof:
                return None

            chunk = await self._read_chunk(loop, fd)
            if chunk:
                self._buffer += chunk
            else:
                self._eof = True


class ConsoleUI:
    """Renders menus, questions, feedback and statistics to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, clear_screen: bool = True):
        self._stream = stream if stream is not None else sys.stdout
        self._clear_screen = clear_screen

    def _write(self, text: str = "", end: str = "\n") -> None:
        self._stream.write(text + end)
        self._stream.flush()

    def _separator(self, color: str = Colors.HEADER) -> None:
        self._write(color + "═" * SEPARATOR_WIDTH + Colors.RESET)

    def _title(self, title: str) -> None:
        self._write()
        self._separator()
        self._write(Colors.HEADER + title.center(SEPARATOR_WIDTH).rstrip() + Colors.RESET)
        self._separator()
        self._write()

    def clear(self) -> None:
        """Clear the terminal screen."""
        if self._clear_screen and self._stream.isatty():
            self._write("\033[2J\033[H", end="")

    # Menus

    def show_main_menu(self) -> None:
        self.clear()
        self._title("TERMINAL TRIVIA GAME - MAIN MENU")
        self._write("  1. Start New Game (Easy)")
        self._write("  2. Start New Game (Medium)")
        self._write("  3. Start New Game (Hard)")
        self._write("  4. Start New Game (Mixed Difficulty)")
        self._write("  5. Exit")
        self.show_prompt("Enter your choice")

    def show_player_menu(self) -> None:
        self.clear()
        self._title("SELECT NUMBER OF PLAYERS")
        self._write("  1. Single Player")
        self._write("  2. Two Players")
        self._write("  3. Three Players")
        self._write("  4. Four Players")
        self.show_prompt("Enter your choice")

    def show_player_names_header(self) -> None:
        self.clear()
        self._title("ENTER PLAYER NAMES")

    def show_prompt(self, text: str) -> None:
        self._write(f"\n  {text}: ", end="")

    def show_continue_prompt(self) -> None:
        self._write("\nPress Enter to continue...", end="")

    # Game flow

    def show_game_intro(self, config: GameConfig) -> None:
        self.clear()
        self._title("WELCOME TO TERMINAL TRIVIA GAME!")
        difficulty = difficulty_name(config.difficulty) if config.difficulty is not None else "Any"
        self._write("Game Configuration:")
        self._write(f"  Questions: {config.questions_per_game}")
        if config.use_timer:
            self._write(f"  Time per question: {config.time_per_question} seconds")
        else:
            self._write("  Time per question: unlimited")
        self._write(f"  Difficulty: {difficulty}")
        self._write(f"  Players: {config.num_players}")

    def show_question(
        self,
        question: Question,
        round_number: int,
        total_rounds: int,
        player_name: Optional[str] = None,
    ) -> None:
        self.clear()
        self._write()
        self._separator(Colors.WARNING)
        self._write(Colors.WARNING + f"  Question {round_number} of {total_rounds}" + Colors.RESET)
        if player_name:
            self._write(Colors.PLAYER + f"  Player: {player_name}" + Colors.RESET)
        self._write(Colors.QUESTION + f"  {question.text}" + Colors.RESET)
        self._write(f"  Difficulty: {difficulty_name(question.difficulty)}")
        self._separator(Colors.WARNING)
        self._write()
        for number, option in enumerate(question.options, start=1):
            self._write(Colors.OPTION + f"  {number}. {option}" + Colors.RESET)
        self._write()

    def show_answer_prompt(self, option_count: int, time_limit: Optional[int] = None) -> None:
        if time_limit is not None:
            self._write(f"  Time remaining: {time_limit} seconds")
        self._write(f"  Enter your answer (1-{option_count}) or 'q' to quit: ", end="")

    def show_invalid_answer(self, option_count: int) -> None:
        self._write(Colors.WARNING + f"  Invalid input. Enter 1-{option_count}: " + Colors.RESET, end="")

    def show_timer(self, remaining: int) -> None:
        if remaining <= 5:
            color = Colors.ERROR
        elif remaining <= 10:
            color = Colors.WARNING
        else:
            color = Fore.GREEN
        # Save and restore the cursor so the countdown does not disturb typing
        self._write(f"\0337\r{color}  Time remaining: {remaining} seconds   {Colors.RESET}\0338", end="")

    def show_time_up(self) -> None:
        self._write("\n\n" + Colors.ERROR + "  Time's up!" + Colors.RESET)

    def show_correct(self, points: int) -> None:
        self._write("\n" + Colors.SUCCESS + f"  Correct! +{points} points" + Colors.RESET)

    def show_wrong(self, question: Question, timed_out: bool = False) -> None:
        prefix = "Time's up!" if timed_out else "Wrong!"
        self._write(
            "\n" + Colors.ERROR +
            f"  {prefix} The correct answer was: {question.correct_index + 1}. {question.correct_option}" +
            Colors.RESET
        )

    def show_quit(self) -> None:
        self._write("\n" + Colors.WARNING + "Game quit by user." + Colors.RESET)

    def show_scores(self, players: List[Player]) -> None:
        self._write("\nCurrent Scores:")
        for player in players:
            self._write(f"  {player.name}: {player.score} points")

    def show_stats(self, report) -> None:
        """Render the final statistics of a game report."""
        self.clear()
        self._title("GAME STATISTICS")

        if report.players:
            self._write("Final Scores:\n")
            for player in report.players:
                self._write(Colors.PLAYER + f"  {player.name}:" + Colors.RESET)
                self._write(f"    Score: {player.score} points")
                self._write(f"    Correct: {player.correct_answers}")
                self._write(f"    Wrong: {player.wrong_answers}")
                self._write(f"    Timeouts: {player.timeouts}")
                if player.answered > 0:
                    self._write(f"    Accuracy: {player.accuracy:.1f}%")
                self._write()

            if report.is_tie:
                self._write(Colors.WARNING + "It's a tie!" + Colors.RESET)
            elif report.winner is not None:
                self._write(
                    Colors.SUCCESS +
                    f"Winner: {report.winner.name} with {report.winner.score} points!" +
                    Colors.RESET
                )
        else:
            stats = report.stats
            self._write(f"  Total Questions: {stats.total_questions}")
            self._write(f"  Correct Answers: {stats.correct_answers}")
            self._write(f"  Wrong Answers: {stats.wrong_answers}")
            self._write(f"  Timeouts: {stats.timeouts}")
            self._write(f"  Final Score: {stats.score} points")
            if stats.total_questions > 0:
                self._write(f"  Accuracy: {stats.accuracy:.1f}%")

        self._write()
        self._separator()

    # Status messages

    def show_error(self, message: str) -> None:
        self._write(Colors.ERROR + f"[ERROR] {message}" + Colors.RESET)

    def show_warning(self, message: str) -> None:
        self._write(Colors.WARNING + message + Colors.RESET)

    def show_success(self, message: str) -> None:
        self._write(Colors.SUCCESS + f"[SUCCESS] {message}" + Colors.RESET)

    def show_message(self, message: str) -> None:
        self._write(message)
