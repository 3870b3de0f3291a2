#!/usr/bin/env python3
"""
Terminal Trivia Game - Main Entry Point

This script runs the trivia game in the terminal. Settings are read from
config.json; the question file can be overridden on the command line.

Usage:
    python main.py [QUESTIONS_FILE] [--config CONFIG] [--seed N]

Configuration:
    1. Edit config.json to change timer, question count and logging settings
    2. Pass a path to use a different question file
"""

import argparse
import asyncio
import sys
import json
import logging
from pathlib import Path

import colorama

DEFAULT_CONFIG_FILE = "config.json"


def load_config(config_path: Path) -> dict:
    """Load configuration from a JSON file, falling back to defaults if it is missing."""
    if not config_path.exists():
        print(f"⚠️  {config_path} not found, using default settings")
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        print(f"❌ Error: Invalid JSON in {config_path}: {e}")
        sys.exit(1)
    except OSError as e:
        print(f"❌ Error loading {config_path}: {e}")
        sys.exit(1)

    if not isinstance(config, dict):
        print(f"❌ Error: {config_path} must contain a JSON object")
        sys.exit(1)
    return config


def setup_logging_from_config(config: dict) -> None:
    """Set up logging based on configuration."""
    log_config = config.get('logging', {})
    log_level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
    log_directory = Path(log_config.get('log_directory', './logs/'))

    # Create logs directory
    log_directory.mkdir(parents=True, exist_ok=True)

    handlers = [logging.FileHandler(log_directory / "trivia.log", encoding='utf-8')]
    # Console logging would interleave with the game screen, so it is opt-in
    if log_config.get('console', False):
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Terminal trivia quiz for 1-4 players")
    parser.add_argument(
        "questions_file",
        nargs="?",
        help="Question file to load (overrides config.json)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILE),
        help=f"Configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for question selection",
    )
    return parser.parse_args(argv)


async def run_game_with_config(args: argparse.Namespace) -> int:
    """Run the game with configuration."""
    # Load configuration
    config = load_config(args.config)

    # Command line arguments take precedence over config file values
    if args.questions_file:
        config['questions_file'] = args.questions_file
    if args.seed is not None:
        config.setdefault('game', {})['random_seed'] = args.seed

    # Set up logging
    setup_logging_from_config(config)

    # Import and run the game
    from trivia.app import run_app
    return await run_app(config)


def main(argv=None) -> None:
    args = parse_args(argv)
    colorama.init()
    try:
        exit_code = asyncio.run(run_game_with_config(args))
    except KeyboardInterrupt:
        print("\n👋 Game stopped by user")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
