"""Tests for Telegram helpers that do not need a running bot."""

from unittest.mock import MagicMock

from timeblock.telegram_bot import AuthFilter, parse_clock_time
from timeblock.telegram_format import chunk_lines


class TestChunkLines:
    def test_short_text_single_chunk(self):
        assert chunk_lines("a\nb\n") == ["a\nb\n"]

    def test_breaks_between_lines(self):
        text = "aaaa\nbbbb\ncccc\n"
        assert chunk_lines(text, limit=10) == ["aaaa\nbbbb\n", "cccc\n"]

    def test_long_line_is_split(self):
        chunks = chunk_lines("x" * 25, limit=10)
        assert chunks == ["x" * 10, "x" * 10, "x" * 5]

    def test_chunks_respect_limit(self):
        text = "\n".join(f"- {i}am-{i + 1}am Block number {i}" for i in range(200))
        chunks = chunk_lines(text, limit=300)
        assert "".join(chunks) == text
        assert all(len(c) <= 300 for c in chunks)

    def test_empty(self):
        assert chunk_lines("") == []


class TestParseClockTime:
    def test_valid(self):
        assert parse_clock_time("07:00") == (7, 0)
        assert parse_clock_time("23:59") == (23, 59)

    def test_invalid(self):
        assert parse_clock_time("7am") is None
        assert parse_clock_time("24:00") is None
        assert parse_clock_time("07:60") is None


class TestAuthFilter:
    def _update(self, user_id):
        update = MagicMock()
        update.effective_user.id = user_id
        return update

    def test_open_when_unconfigured(self):
        assert AuthFilter([]).check_update(self._update(5)) is True

    def test_allowed(self):
        auth = AuthFilter([111])
        assert auth.check_update(self._update(111)) is True
        assert auth.check_update(self._update(222)) is False

    def test_no_user(self):
        update = MagicMock()
        update.effective_user = None
        assert AuthFilter([111]).check_update(update) is False
