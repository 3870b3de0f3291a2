"""
Interactive application flow for the terminal trivia game.
"""
import logging
from typing import Any, Dict, List, Optional

from .config_manager import ConfigManager
from .console import ConsoleUI, StdinLineReader
from .data_manager import DataManager
from .engine import GameSession
from .errors import AllocationError, SourceUnavailableError, TriviaError
from .models import Difficulty, MAX_PLAYERS, MIN_PLAYERS, difficulty_name
from .question_store import QuestionStore

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# Main menu choice -> difficulty filter (None means mixed)
MENU_DIFFICULTIES = {
    1: Difficulty.EASY,
    2: Difficulty.MEDIUM,
    3: Difficulty.HARD,
    4: None,
}
MENU_EXIT = 5


def parse_choice(text: Optional[str]) -> int:
    """Parse a menu choice, returning 0 for anything that is not an integer."""
    if text is None:
        return 0
    try:
        return int(text.strip())
    except ValueError:
        return 0


class TriviaApp:
    """Terminal trivia game: loads questions, then runs games from a menu."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        ui: Optional[ConsoleUI] = None,
        reader=None,
        timer_tick: float = 1.0,
    ):
        self.app_config = config or {}
        self.ui = ui if ui is not None else ConsoleUI()
        self.reader = reader if reader is not None else StdinLineReader()
        self.timer_tick = timer_tick

        self.config_manager = ConfigManager()
        self.data_manager: Optional[DataManager] = None

    @property
    def store(self) -> Optional[QuestionStore]:
        return self.data_manager.store if self.data_manager else None

    def apply_configuration(self) -> None:
        """Apply settings from the configuration file to the config manager."""
        result = self.config_manager.load_from_dict(self.app_config)
        for issue in result['issues']:
            logger.warning(f"Configuration value ignored: {issue}")
        logger.info("Configuration applied")

    def load_question_data(self) -> bool:
        """
        Load the question file named by the configuration.

        Returns:
            True if at least one question was loaded
        """
        settings = self.config_manager.get_game_settings()
        path = self.config_manager.get_questions_file()
        self.data_manager = DataManager(QuestionStore(seed=settings.random_seed))

        self.ui.show_message(f"Loading questions from: {path}")
        try:
            loaded = self.data_manager.load_questions(path)
        except (SourceUnavailableError, AllocationError) as e:
            self.ui.show_error(f"Failed to load questions: {e}")
            return False

        if loaded <= 0:
            self.ui.show_error("Failed to load questions or no questions found")
            self.ui.show_error("Please ensure the questions file exists and is properly formatted")
            return False

        self.ui.show_success(f"Loaded {loaded} questions")
        return True

    async def _read_line(self) -> Optional[str]:
        return await self.reader.readline()

    async def _wait_for_enter(self) -> bool:
        """Wait for Enter; False at end of input."""
        self.ui.show_continue_prompt()
        return await self._read_line() is not None

    async def _choose_players(self) -> Optional[int]:
        """Ask for the number of players; 0 for an invalid answer, None at end of input."""
        self.ui.show_player_menu()
        line = await self._read_line()
        if line is None:
            return None
        choice = parse_choice(line)
        if MIN_PLAYERS <= choice <= MAX_PLAYERS:
            return choice
        return 0

    async def _read_player_names(self, count: int) -> List[str]:
        self.ui.show_player_names_header()
        names = []
        for number in range(1, count + 1):
            self.ui.show_prompt(f"Enter name for Player {number}")
            line = await self._read_line()
            names.append(line.strip() if line else "")
        return names

    async def play_game(self, difficulty: Optional[Difficulty], num_players: int) -> Optional[int]:
        """
        Configure, run and clean up one game session.

        Returns:
            Final score, or None if the session could not be started
        """
        if self.store.count_by_difficulty(difficulty) == 0:
            label = difficulty_name(difficulty) if difficulty is not None else "any"
            self.ui.show_error(f"No questions available for difficulty: {label}")
            return None

        settings = self.config_manager.get_game_settings()
        try:
            game_config = self.config_manager.build_game_config(difficulty, num_players)
            session = GameSession(
                self.store,
                game_config,
                ui=self.ui,
                reader=self.reader,
                timer_tick=self.timer_tick,
                pause_between_rounds=settings.pause_between_rounds,
            )
        except (TriviaError, ValueError) as e:
            logger.error(f"Failed to initialize game: {e}")
            self.ui.show_error("Failed to initialize game")
            return None

        try:
            if game_config.is_multiplayer:
                session.set_player_names(await self._read_player_names(num_players))
            return await session.run_session()
        finally:
            await session.cleanup()

    async def run(self) -> int:
        """
        Run the application until the player exits.

        Returns:
            Process exit status
        """
        self.apply_configuration()
        if not self.load_question_data():
            return EXIT_FAILURE

        while True:
            self.ui.show_main_menu()
            line = await self._read_line()
            if line is None:
                break

            choice = parse_choice(line)
            if choice == MENU_EXIT:
                break

            if choice not in MENU_DIFFICULTIES:
                self.ui.show_warning("\nInvalid choice. Please try again.")
                if not await self._wait_for_enter():
                    break
                continue

            num_players = await self._choose_players()
            if num_players is None:
                break
            if num_players == 0:
                self.ui.show_warning("\nInvalid choice. Returning to main menu.")
                if not await self._wait_for_enter():
                    break
                continue

            await self.play_game(MENU_DIFFICULTIES[choice], num_players)
            if not await self._wait_for_enter():
                break

        self.ui.show_message("\nThank you for playing Terminal Trivia Game!")
        return EXIT_SUCCESS


async def run_app(config: Optional[Dict[str, Any]] = None) -> int:
    """Run the trivia application with the given configuration."""
    app = TriviaApp(config)
    logger.info("Starting Terminal Trivia Game...")
    return await app.run()
