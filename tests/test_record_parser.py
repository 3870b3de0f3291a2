"""
Unit tests for the lenient question record parser.
"""
import unittest

from trivia.errors import RecordParseError
from trivia.models import Difficulty, MAX_OPTION_LEN, MAX_QUESTION_LEN
from trivia.record_parser import iter_records, parse_record, parse_records
from tests.test_fixtures import TestFixtures


class TestIterRecords(unittest.TestCase):
    """Test cases for locating top-level records."""

    def test_finds_top_level_objects(self):
        source = '[{"a": 1}, {"b": {"c": 2}}]'
        self.assertEqual(list(iter_records(source)), ['{"a": 1}', '{"b": {"c": 2}}'])

    def test_skips_comment_lines(self):
        source = '# {"ignored": true}\n  # {"also": 1}\n{"kept": 1}\n'
        self.assertEqual(list(iter_records(source)), ['{"kept": 1}'])

    def test_braces_inside_strings_do_not_nest(self):
        source = '{"question": "What does } mean?"} {"x": "\\"{"}'
        records = list(iter_records(source))
        self.assertEqual(len(records), 2)
        self.assertEqual(records[0], '{"question": "What does } mean?"}')

    def test_unterminated_record_dropped(self):
        source = '{"complete": 1}\n{"question": "open"'
        self.assertEqual(list(iter_records(source)), ['{"complete": 1}'])

    def test_no_records(self):
        self.assertEqual(list(iter_records("[\n]\n")), [])

    def test_string_ends_at_line_end(self):
        source = '{"question": "open\n}\n{"question": "next"}'
        self.assertEqual(list(iter_records(source)), ['{"question": "open\n}', '{"question": "next"}'])

    def test_unbalanced_quote_does_not_hide_later_records(self):
        questions, _ = parse_records(TestFixtures.create_source_with_unbalanced_quote())
        self.assertEqual([q.text for q in questions], ["First?", "Second?", "Third?"])

    def test_unbalanced_quote_on_single_line(self):
        questions, _ = parse_records(TestFixtures.create_source_with_unbalanced_quote(separator=" "))
        self.assertEqual([q.text for q in questions], ["First?", "Second?", "Third?"])


class TestParseRecord(unittest.TestCase):
    """Test cases for parsing a single record."""

    def test_parses_all_fields(self):
        question = parse_record(
            '{"question": "Capital of Japan?", "options": ["Osaka", "Tokyo", "Kyoto"],'
            ' "correct": 1, "difficulty": "medium"}'
        )
        self.assertEqual(question.text, "Capital of Japan?")
        self.assertEqual(question.options, ("Osaka", "Tokyo", "Kyoto"))
        self.assertEqual(question.correct_index, 1)
        self.assertEqual(question.difficulty, Difficulty.MEDIUM)

    def test_field_order_does_not_matter(self):
        question = parse_record(
            '{"difficulty": "hard", "correct": 0, "options": ["Yes", "No"], "question": "Ready?"}'
        )
        self.assertEqual(question.text, "Ready?")
        self.assertEqual(question.difficulty, Difficulty.HARD)
        self.assertEqual(question.correct_index, 0)

    def test_missing_difficulty_defaults_to_easy(self):
        question = parse_record('{"question": "Q", "options": ["a", "b"], "correct": 0}')
        self.assertEqual(question.difficulty, Difficulty.EASY)

    def test_unknown_difficulty_defaults_to_easy(self):
        question = parse_record(
            '{"question": "Q", "options": ["a"], "correct": 0, "difficulty": "Extreme"}'
        )
        self.assertEqual(question.difficulty, Difficulty.EASY)

    def test_difficulty_prefix_match(self):
        question = parse_record(
            '{"question": "Q", "options": ["a"], "correct": 0, "difficulty": "hardcore"}'
        )
        self.assertEqual(question.difficulty, Difficulty.HARD)

    def test_difficulty_is_case_sensitive(self):
        question = parse_record(
            '{"question": "Q", "options": ["a"], "correct": 0, "difficulty": "HARD"}'
        )
        self.assertEqual(question.difficulty, Difficulty.EASY)

    def test_only_first_four_options_kept(self):
        question = parse_record(
            '{"question": "Q", "options": ["a", "b", "c", "d", "e", "f"], "correct": 3}'
        )
        self.assertEqual(question.options, ("a", "b", "c", "d"))

    def test_correct_index_beyond_kept_options_rejected(self):
        with self.assertRaises(RecordParseError):
            parse_record('{"question": "Q", "options": ["a", "b", "c", "d", "e"], "correct": 4}')

    def test_escapes_decoded(self):
        question = parse_record(
            '{"question": "Say \\"hi\\"", "options": ["caf\\u00e9", "b"], "correct": 0}'
        )
        self.assertEqual(question.text, 'Say "hi"')
        self.assertEqual(question.options[0], "café")

    def test_long_text_truncated(self):
        long_text = "x" * 600
        long_option = "y" * 300
        question = parse_record(
            f'{{"question": "{long_text}", "options": ["{long_option}"], "correct": 0}}'
        )
        self.assertEqual(len(question.text), MAX_QUESTION_LEN)
        self.assertEqual(len(question.options[0]), MAX_OPTION_LEN)

    def test_missing_question_rejected(self):
        with self.assertRaises(RecordParseError):
            parse_record('{"options": ["a", "b"], "correct": 0}')

    def test_missing_options_rejected(self):
        with self.assertRaises(RecordParseError):
            parse_record('{"question": "Q", "correct": 0}')

    def test_empty_options_rejected(self):
        with self.assertRaises(RecordParseError):
            parse_record('{"question": "Q", "options": [], "correct": 0}')

    def test_missing_correct_rejected(self):
        with self.assertRaises(RecordParseError):
            parse_record('{"question": "Q", "options": ["a", "b"]}')

    def test_non_numeric_correct_rejected(self):
        with self.assertRaises(RecordParseError):
            parse_record('{"question": "Q", "options": ["a", "b"], "correct": "a"}')

    def test_out_of_range_correct_rejected(self):
        with self.assertRaises(RecordParseError):
            parse_record('{"question": "Q", "options": ["a", "b"], "correct": 2}')
        with self.assertRaises(RecordParseError):
            parse_record('{"question": "Q", "options": ["a", "b"], "correct": -1}')


class TestParseRecords(unittest.TestCase):
    """Test cases for parsing a whole source."""

    def test_skips_malformed_records(self):
        questions, skipped = parse_records(TestFixtures.create_valid_source())
        self.assertEqual(len(questions), 3)
        self.assertEqual(skipped, 1)
        self.assertEqual(
            [q.difficulty for q in questions],
            [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD],
        )

    def test_multiline_record(self):
        questions, _ = parse_records(TestFixtures.create_valid_source())
        self.assertEqual(questions[2].text, "Hardest natural substance?")
        self.assertEqual(questions[2].correct_option, "Diamond")


if __name__ == '__main__':
    unittest.main()
