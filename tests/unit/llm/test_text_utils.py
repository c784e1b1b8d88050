"""
Unit tests for text processing utilities.
"""

from conversation_classifier.llm.text_utils import (
    normalize_conversation,
    truncate_at_sentence_boundary,
)


class TestNormalizeConversation:
    """Tests for normalize_conversation."""

    def test_strips_surrounding_whitespace(self):
        assert normalize_conversation("  hello there \n") == "hello there"

    def test_converts_crlf(self):
        assert normalize_conversation("User: hi\r\nAssistant: hello") == "User: hi\nAssistant: hello"

    def test_collapses_blank_line_runs(self):
        assert normalize_conversation("a\n\n\n\n\nb") == "a\n\nb"

    def test_keeps_single_blank_line(self):
        assert normalize_conversation("a\n\nb") == "a\n\nb"

    def test_whitespace_only_becomes_empty(self):
        assert normalize_conversation(" \r\n\t ") == ""


class TestTruncateAtSentenceBoundary:
    """Tests for truncate_at_sentence_boundary."""

    def test_short_text_unchanged(self):
        text = "Short text."
        assert truncate_at_sentence_boundary(text, 100) == text

    def test_exact_length_unchanged(self):
        text = "Exactly."
        assert truncate_at_sentence_boundary(text, len(text)) == text

    def test_truncates_at_sentence_end(self):
        assert truncate_at_sentence_boundary("Hello. World. Test.", 15) == "Hello. World."

    def test_handles_question_and_exclamation(self):
        text = "Is this right? Yes it is! And more text follows here."
        assert truncate_at_sentence_boundary(text, 30) == "Is this right? Yes it is!"

    def test_falls_back_to_word_boundary(self):
        text = "one two three four five six seven eight nine ten"
        result = truncate_at_sentence_boundary(text, 22)
        assert result == "one two three four"

    def test_hard_truncation_without_spaces(self):
        text = "a" * 50
        assert truncate_at_sentence_boundary(text, 10) == "a" * 10
