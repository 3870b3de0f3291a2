"""
Data manager for question file operations and load-error tracking.
"""
import os
import logging
from typing import Any, Dict, List, Optional
from pathlib import Path

from .errors import AllocationError, RecordParseError, SourceUnavailableError
from .question_store import QuestionStore


class DataManager:
    """Loads question files into a QuestionStore with safety checks."""

    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB limit

    def __init__(self, store: Optional[QuestionStore] = None):
        """
        Initialize DataManager.

        Args:
            store: Store to load questions into; a new one is created if omitted
        """
        self.store = store if store is not None else QuestionStore()
        self.logger = logging.getLogger(__name__)
        self.load_errors: List[str] = []  # Track loading errors for user feedback
        self.source_path: Optional[Path] = None

    def load_questions(self, path) -> int:
        """
        Load questions from a file into the store.

        Args:
            path: Path to the question file

        Returns:
            Number of questions loaded from the file

        Raises:
            SourceUnavailableError: If the file is missing, unreadable or too large
            AllocationError: If the store fills up while loading
        """
        self.load_errors.clear()
        self.source_path = Path(path)

        read_result = self._read_file_safely(self.source_path)
        if not read_result['success']:
            self.load_errors.append(f"{self.source_path.name}: {read_result['error']}")
            self.logger.error(f"Failed to read questions file {self.source_path}: {read_result['error']}")
            raise SourceUnavailableError(read_result['error'])

        skipped_before = self.store.skipped_records
        try:
            loaded = self.store.load_from_source(read_result['text'])
        except RecordParseError as e:
            self.load_errors.append(f"{self.source_path.name}: {e}")
            self.logger.error(f"No question records in {self.source_path}: {e}")
            return 0
        except AllocationError as e:
            self.load_errors.append(f"{self.source_path.name}: {e}")
            self.logger.error(f"Question store exhausted while loading {self.source_path}: {e}")
            raise

        skipped = self.store.skipped_records - skipped_before
        if skipped:
            self.load_errors.append(f"{self.source_path.name}: skipped {skipped} malformed records")
            self.logger.warning(f"Skipped {skipped} malformed records in {self.source_path}")

        self.logger.info(f"Loaded {loaded} questions from '{self.source_path}'")
        return loaded

    def _read_file_safely(self, file_path: Path) -> Dict[str, Any]:
        """
        Read a question file with comprehensive error handling.

        Args:
            file_path: Path to the file to read

        Returns:
            Dictionary with success status and either the text or an error message
        """
        try:
            # Check file accessibility
            if not file_path.exists():
                return {
                    'success': False,
                    'error': f"File not found: {file_path}"
                }

            if not file_path.is_file():
                return {
                    'success': False,
                    'error': f"Not a file: {file_path}"
                }

            if not os.access(file_path, os.R_OK):
                return {
                    'success': False,
                    'error': f"Permission denied: Cannot read {file_path}"
                }

            # Check file size (prevent loading extremely large files)
            file_size = file_path.stat().st_size
            if file_size > self.MAX_FILE_SIZE:
                return {
                    'success': False,
                    'error': f"File too large ({file_size / 1024 / 1024:.1f}MB). Maximum size is {self.MAX_FILE_SIZE / 1024 / 1024}MB"
                }

            with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                return {
                    'success': True,
                    'text': f.read()
                }

        except PermissionError:
            return {
                'success': False,
                'error': f"Permission denied: Cannot read {file_path}"
            }
        except OSError as e:
            return {
                'success': False,
                'error': f"System error reading {file_path}: {e}"
            }

    def get_load_errors(self) -> List[str]:
        """
        Get list of errors encountered during the last load operation.

        Returns:
            List of error messages
        """
        return self.load_errors.copy()

    def has_load_errors(self) -> bool:
        return len(self.load_errors) > 0

    def get_loading_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the loading operation.

        Returns:
            Dictionary with loading statistics and status
        """
        return {
            'total_questions': self.store.count,
            'skipped_records': self.store.skipped_records,
            'has_errors': self.has_load_errors(),
            'error_count': len(self.load_errors),
            'errors': self.get_load_errors(),
            'source_path': str(self.source_path) if self.source_path else None,
        }
