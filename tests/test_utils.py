"""Tests for token validation and message splitting."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botapi.constants import MAX_MESSAGE_LENGTH
from botapi.utils import _not_space, _walk, is_valid_token, split_message


# ── is_valid_token ───────────────────────────────────────────────────────────


class TestIsValidToken:
    """Validate the bot token shape check."""

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("110201543:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawq", True),
            ("110201543:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsaq", False),
            ("113:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawq", True),
            ("12345678901:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawq", True),
            ("1234567890123:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawq", False),
            ("110201543:AAHdqTcvCH1vGWJxf-eofSAs0K5PALDsawq", True),
            ("", False),
        ],
    )
    def test_tokens(self, token: str, expected: bool) -> None:
        assert is_valid_token(token) is expected


# ── split_message ────────────────────────────────────────────────────────────


class TestSplitMessage:
    """Validate whitespace-aware splitting at the UTF-8 byte limit."""

    def test_short_text_is_one_chunk(self) -> None:
        assert list(split_message("hello world")) == ["hello world"]

    def test_cut_at_word_boundary(self) -> None:
        assert list(split_message("hello world", 8)) == ["hello", "world"]

    def test_edge_on_space(self) -> None:
        first = "a" * (MAX_MESSAGE_LENGTH - 1)
        second = "bbb ccc ddd"
        chunks = list(split_message(first + "      " + second))
        assert chunks == [first, second]

    def test_edge_on_letter(self) -> None:
        first = "a" * (MAX_MESSAGE_LENGTH - 3)
        second = "bbb ccc ddd"
        chunks = list(split_message(first + " " + second))
        assert chunks == [first, second]

    def test_long_word_is_cut_at_limit(self) -> None:
        first = "a" * MAX_MESSAGE_LENGTH
        assert list(split_message(first + "bbb")) == [first, "bbb"]

    def test_long_word_single_overflow(self) -> None:
        first = "a" * MAX_MESSAGE_LENGTH
        assert list(split_message(first + "a")) == [first, "a"]

    def test_multibyte_counts_bytes(self) -> None:
        cyrillic = "к" * (MAX_MESSAGE_LENGTH // 2)
        latin = "a" * MAX_MESSAGE_LENGTH
        chunks = list(split_message(cyrillic + latin + cyrillic))
        assert chunks == [cyrillic, latin, cyrillic]

    def test_multibyte_char_not_split(self) -> None:
        first = "a" * (MAX_MESSAGE_LENGTH - 1)
        assert list(split_message(first + "к")) == [first, "к"]

    def test_leading_spaces_dropped(self) -> None:
        text = " " * (MAX_MESSAGE_LENGTH - 1) + "aaaa"
        assert list(split_message(text)) == ["aaaa"]

    def test_spaces_only(self) -> None:
        assert list(split_message(" " * (MAX_MESSAGE_LENGTH + 1))) == []

    def test_empty(self) -> None:
        assert list(split_message("")) == []

    def test_every_chunk_within_limit(self) -> None:
        text = " ".join(["word"] * 50 + ["ёжик"] * 50)
        chunks = list(split_message(text, 32))
        assert all(len(chunk.encode("utf-8")) <= 32 for chunk in chunks)
        assert " ".join(chunks).split() == text.split()

    def test_char_larger_than_limit_still_progresses(self) -> None:
        assert list(split_message("кк", 1)) == ["к", "к"]

    def test_is_lazy_generator(self) -> None:
        chunks = split_message("one two three", 5)
        assert next(chunks) == "one"
        assert list(chunks) == ["two", "three"]


class TestWalk:
    """Validate the run scanner used by the splitter."""

    def test_stops_at_rejected_char(self) -> None:
        assert _walk("ab cd", 0, 0, 10, _not_space) == (2, 2, False)

    def test_stops_when_full(self) -> None:
        assert _walk("abcdef", 1, 0, 3, _not_space) == (4, 3, True)

    def test_reports_end_of_text(self) -> None:
        assert _walk("ab  ", 2, 2, 10, str.isspace) == (4, 4, True)

    def test_counts_utf8_bytes(self) -> None:
        assert _walk("ккк", 0, 0, 5, _not_space) == (2, 4, True)
