"""
Configuration manager for trivia game settings.
"""
import logging
from dataclasses import replace
from typing import Optional, Dict, Any

from .models import Difficulty, GameConfig, GameSettings, MAX_PLAYERS, MIN_PLAYERS


class ConfigManager:
    """Manages game settings and builds per-session configurations."""

    # Default configuration values
    DEFAULT_QUESTIONS_PER_GAME = 5
    DEFAULT_TIME_PER_QUESTION = 30
    DEFAULT_USE_TIMER = True
    DEFAULT_QUESTIONS_FILE = "data/questions.json"

    # Validation limits
    MIN_TIME_PER_QUESTION = 5
    MAX_TIME_PER_QUESTION = 300  # 5 minutes
    MIN_QUESTIONS_PER_GAME = 1
    MAX_QUESTIONS_PER_GAME = 100

    def __init__(self):
        """Initialize ConfigManager with default settings."""
        self.logger = logging.getLogger(__name__)
        self._settings = GameSettings()
        self._questions_file = self.DEFAULT_QUESTIONS_FILE

    def get_game_settings(self) -> GameSettings:
        """
        Get a copy of the current game settings.

        Returns:
            GameSettings object with current configuration
        """
        return replace(self._settings)

    def _validate_int(self, value, label: str, minimum: int, maximum: int, unit: str = "") -> Optional[Dict[str, Any]]:
        """Return an error result if value is not an int within limits, else None."""
        suffix = f" {unit}" if unit else ""
        # bool is a subclass of int but never a valid count
        if not isinstance(value, int) or isinstance(value, bool):
            error_msg = f"{label} must be an integer, got {type(value).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a number, got {type(value).__name__}"
            }
        if value < minimum:
            error_msg = f"{label} must be at least {minimum}{suffix}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Too low: Minimum is {minimum}{suffix}"
            }
        if value > maximum:
            error_msg = f"{label} cannot exceed {maximum}{suffix}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Too high: Maximum is {maximum}{suffix}"
            }
        return None

    def set_questions_per_game(self, count: int) -> Dict[str, Any]:
        """
        Set the number of questions each player is asked.

        Args:
            count: Questions per player

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        error = self._validate_int(
            count, "Questions per game", self.MIN_QUESTIONS_PER_GAME, self.MAX_QUESTIONS_PER_GAME
        )
        if error:
            return error

        self._settings.questions_per_game = count
        self.logger.info(f"Questions per game set to {count}")
        return {
            'success': True,
            'message': f"Questions per game set to {count}",
            'user_message': f"✅ Each player gets {count} questions"
        }

    def set_time_per_question(self, seconds: int) -> Dict[str, Any]:
        """
        Set the countdown duration for each question.

        Args:
            seconds: Time limit in seconds

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        error = self._validate_int(
            seconds, "Time per question",
            self.MIN_TIME_PER_QUESTION, self.MAX_TIME_PER_QUESTION, "seconds"
        )
        if error:
            return error

        self._settings.time_per_question = seconds
        self.logger.info(f"Time per question set to {seconds} seconds")
        return {
            'success': True,
            'message': f"Time per question set to {seconds} seconds",
            'user_message': f"✅ Timer set to {seconds} seconds"
        }

    def _set_flag(self, attribute: str, value: bool, label: str) -> Dict[str, Any]:
        if not isinstance(value, bool):
            error_msg = f"{label} must be a boolean, got {type(value).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected true/false, got {type(value).__name__}"
            }

        setattr(self._settings, attribute, value)
        state = "enabled" if value else "disabled"
        self.logger.info(f"{label} {state}")
        return {
            'success': True,
            'message': f"{label} {state}",
            'user_message': f"✅ {label} {state}"
        }

    def set_use_timer(self, use_timer: bool) -> Dict[str, Any]:
        return self._set_flag('use_timer', use_timer, "Question timer")

    def set_avoid_repeats(self, avoid_repeats: bool) -> Dict[str, Any]:
        return self._set_flag('avoid_repeats', avoid_repeats, "Repeat avoidance")

    def set_pause_between_rounds(self, pause: bool) -> Dict[str, Any]:
        return self._set_flag('pause_between_rounds', pause, "Pause between rounds")

    def set_random_seed(self, seed: Optional[int]) -> Dict[str, Any]:
        """
        Set the seed for question selection, or None for a random seed.

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
            error_msg = f"Random seed must be an integer, got {type(seed).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a number, got {type(seed).__name__}"
            }

        self._settings.random_seed = seed
        self.logger.info(f"Random seed set to {seed}")
        return {
            'success': True,
            'message': f"Random seed set to {seed}",
            'user_message': "✅ Random seed updated"
        }

    def set_questions_file(self, path: str) -> Dict[str, Any]:
        """
        Set the path of the question file.

        Args:
            path: Path to the question file

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(path, str):
            error_msg = f"Questions file must be a string, got {type(path).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a path string, got {type(path).__name__}"
            }

        if not path.strip():
            error_msg = "Questions file cannot be empty"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "❌ Questions file path cannot be empty"
            }

        self._questions_file = path.strip()
        self.logger.info(f"Questions file set to {self._questions_file}")
        return {
            'success': True,
            'message': f"Questions file set to {self._questions_file}",
            'user_message': f"✅ Questions will be loaded from {self._questions_file}"
        }

    def get_questions_file(self) -> str:
        return self._questions_file

    def load_from_dict(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply settings from a parsed config.json document.

        Unknown keys are ignored; invalid values are reported and skipped.

        Args:
            config: Configuration dictionary

        Returns:
            Dictionary with success status and the list of rejected settings
        """
        issues = []
        game_config = config.get('game', {}) or {}

        setters = {
            'questions_per_game': self.set_questions_per_game,
            'time_per_question': self.set_time_per_question,
            'use_timer': self.set_use_timer,
            'avoid_repeats': self.set_avoid_repeats,
            'pause_between_rounds': self.set_pause_between_rounds,
            'random_seed': self.set_random_seed,
        }
        for key, setter in setters.items():
            if key in game_config:
                result = setter(game_config[key])
                if not result['success']:
                    issues.append(f"game.{key}: {result['error']}")

        if 'questions_file' in config:
            result = self.set_questions_file(config['questions_file'])
            if not result['success']:
                issues.append(f"questions_file: {result['error']}")

        if issues:
            self.logger.warning(f"Ignored {len(issues)} invalid configuration values")
        return {
            'success': not issues,
            'issues': issues
        }

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values."""
        self._settings = GameSettings(
            questions_per_game=self.DEFAULT_QUESTIONS_PER_GAME,
            time_per_question=self.DEFAULT_TIME_PER_QUESTION,
            use_timer=self.DEFAULT_USE_TIMER,
        )
        self._questions_file = self.DEFAULT_QUESTIONS_FILE
        self.logger.info("All settings reset to default values")

    def validate_settings(self) -> Dict[str, Any]:
        """
        Validate current settings and return validation results.

        Returns:
            Dictionary with validation results and any issues found
        """
        validation_result = {
            "valid": True,
            "issues": []
        }

        count = self._settings.questions_per_game
        if (not isinstance(count, int) or
                count < self.MIN_QUESTIONS_PER_GAME or
                count > self.MAX_QUESTIONS_PER_GAME):
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid questions per game: {count}")

        seconds = self._settings.time_per_question
        if (not isinstance(seconds, int) or
                seconds < self.MIN_TIME_PER_QUESTION or
                seconds > self.MAX_TIME_PER_QUESTION):
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid time per question: {seconds}")

        if not isinstance(self._settings.use_timer, bool):
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid timer setting: {self._settings.use_timer}")

        if not isinstance(self._questions_file, str) or not self._questions_file.strip():
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid questions file: {self._questions_file}")

        return validation_result

    def get_settings_summary(self) -> str:
        """
        Get a formatted summary of current settings.

        Returns:
            Human-readable string describing current settings
        """
        timer_str = (
            f"{self._settings.time_per_question} seconds"
            if self._settings.use_timer
            else "disabled"
        )
        repeats_str = "avoided" if self._settings.avoid_repeats else "allowed"

        return (
            f"Game Settings:\n"
            f"• Questions per player: {self._settings.questions_per_game}\n"
            f"• Timer: {timer_str}\n"
            f"• Repeated questions: {repeats_str}\n"
            f"• Questions File: {self._questions_file}"
        )

    def build_game_config(self, difficulty: Optional[Difficulty], num_players: int) -> GameConfig:
        """
        Build an immutable session configuration from the current settings.

        Args:
            difficulty: Difficulty filter, or None for any difficulty
            num_players: Number of players (1-4)

        Raises:
            ValueError: If num_players is out of range
        """
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise ValueError(f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")

        return GameConfig(
            questions_per_game=self._settings.questions_per_game,
            time_per_question=self._settings.time_per_question,
            difficulty=difficulty,
            use_timer=self._settings.use_timer,
            num_players=num_players,
            avoid_repeats=self._settings.avoid_repeats,
        )
