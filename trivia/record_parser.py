"""
Lenient parser for question records.

The question file is not parsed as JSON. Instead every balanced top-level
``{...}`` object is located by tracking brace depth, and the fields of each
object are extracted independently:

    # comment lines between objects are ignored
    [
      {"question": "2 + 2?", "options": ["3", "4"], "correct": 1, "difficulty": "easy"},
      ...
    ]

A record missing ``question``, ``options`` or a valid ``correct`` index is
rejected; ``difficulty`` is optional and defaults to easy.
"""
import json
import logging
import re
from typing import Iterator, List, Tuple

from .errors import RecordParseError
from .models import (
    Category,
    Difficulty,
    MAX_OPTION_LEN,
    MAX_OPTIONS,
    MAX_QUESTION_LEN,
    Question,
)

logger = logging.getLogger(__name__)

# A double-quoted string body, allowing backslash escapes
_STRING_BODY = r'((?:[^"\\]|\\.)*)'

_QUESTION_RE = re.compile(r'"question"[^:]*:[^"]*"' + _STRING_BODY + '"', re.DOTALL)
_OPTIONS_RE = re.compile(r'"options"[^:]*:[^\[]*\[', re.DOTALL)
_LIST_ITEM_RE = re.compile(r'"' + _STRING_BODY + r'"|\]', re.DOTALL)
_CORRECT_RE = re.compile(r'"correct"[^:]*:\s*([+-]?\d+)')
_DIFFICULTY_RE = re.compile(r'"difficulty"[^:]*:[^"]*"' + _STRING_BODY + '"', re.DOTALL)

_DIFFICULTY_PREFIXES = (
    ("easy", Difficulty.EASY),
    ("medium", Difficulty.MEDIUM),
    ("hard", Difficulty.HARD),
)


def _scan_records(source: str, begin: int):
    # Yields records from begin; returns where to resume after an unterminated object
    depth = 0
    start = begin
    in_string = False
    escaped = False
    i = begin
    length = len(source)

    while i < length:
        ch = source[i]

        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"' or ch == "\n":
                # Strings never span lines
                in_string = False
            i += 1
            continue

        if depth == 0 and (i == 0 or source[i - 1] == "\n"):
            first = i
            while first < length and source[first] in " \t\r":
                first += 1
            if first < length and source[first] == "#":
                newline = source.find("\n", first)
                i = length if newline == -1 else newline + 1
                continue

        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                yield source[start:i + 1]
        elif ch == '"' and depth > 0:
            in_string = True
        i += 1

    if depth > 0:
        logger.debug(f"Dropping unterminated record starting at offset {start}")
        return start + 1
    return None


def iter_records(source: str) -> Iterator[str]:
    """
    Yield the text of every balanced top-level ``{...}`` object in source.

    Brackets, commas and any other text outside objects are ignored, as are
    whole lines starting with ``#`` between objects. Braces inside quoted
    strings do not affect nesting, and a string ends at the end of its line.
    An object left open at the end of the source is dropped and scanning
    resumes just after its opening brace, so one unbalanced record does not
    hide the records that follow it.
    """
    position = 0
    while position is not None:
        position = yield from _scan_records(source, position)


def _decode_string(raw: str) -> str:
    """Decode JSON escapes in a string body, keeping the raw text if they are invalid."""
    if "\\" not in raw:
        return raw
    try:
        return json.loads(f'"{raw}"')
    except json.JSONDecodeError:
        return raw


def _parse_options(record: str) -> List[str]:
    match = _OPTIONS_RE.search(record)
    if match is None:
        raise RecordParseError("Record is missing the 'options' list")

    options = []
    for item in _LIST_ITEM_RE.finditer(record, match.end()):
        if item.group(0) == "]" or len(options) >= MAX_OPTIONS:
            break
        options.append(_decode_string(item.group(1))[:MAX_OPTION_LEN])
    return options


def _parse_difficulty(record: str) -> Difficulty:
    match = _DIFFICULTY_RE.search(record)
    if match is None:
        return Difficulty.EASY
    value = match.group(1)
    for prefix, difficulty in _DIFFICULTY_PREFIXES:
        if value.startswith(prefix):
            return difficulty
    return Difficulty.EASY


def parse_record(record: str) -> Question:
    """
    Parse a single question record.

    Args:
        record: Text of one brace-delimited object

    Returns:
        The parsed Question

    Raises:
        RecordParseError: If a required field is missing or invalid
    """
    if record is None:
        raise RecordParseError("Record text is missing")

    question_match = _QUESTION_RE.search(record)
    if question_match is None:
        raise RecordParseError("Record is missing the 'question' text")
    text = _decode_string(question_match.group(1))[:MAX_QUESTION_LEN]

    options = _parse_options(record)
    if not options:
        raise RecordParseError("Record has no answer options")

    correct_match = _CORRECT_RE.search(record)
    if correct_match is None:
        raise RecordParseError("Record is missing the 'correct' index")
    correct_index = int(correct_match.group(1))
    if not 0 <= correct_index < len(options):
        raise RecordParseError(
            f"Correct index {correct_index} is out of range for {len(options)} options"
        )

    return Question(
        text=text,
        options=tuple(options),
        correct_index=correct_index,
        difficulty=_parse_difficulty(record),
        category=Category.GENERAL,
    )


def parse_records(source: str) -> Tuple[List[Question], int]:
    """
    Parse every record in source, skipping malformed ones.

    Returns:
        Tuple of (parsed questions, number of skipped records)
    """
    questions = []
    skipped = 0
    for index, record in enumerate(iter_records(source)):
        try:
            questions.append(parse_record(record))
        except RecordParseError as e:
            skipped += 1
            logger.warning(f"Skipping malformed record {index + 1}: {e}")
    return questions, skipped

