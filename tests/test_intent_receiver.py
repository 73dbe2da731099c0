"""Tests for intent reception."""

from __future__ import annotations

import io

import pytest

from core.domain.errors import InvalidIntentError
from core.domain.language import Language
from core.services.intent_receiver import clean_intent_text, read_intent_text, receive_intent


class TestCleanIntentText:
    def test_strips_whitespace_and_control_chars(self) -> None:
        assert clean_intent_text("  \x00build\x07 a\ttodo app\r\n") == "build a\ttodo app"

    def test_keeps_inner_newlines(self) -> None:
        assert clean_intent_text("line one\nline two") == "line one\nline two"

    def test_keeps_format_characters(self) -> None:
        family = "\U0001F469\u200d\U0001F467"
        text = f"send {family} to mum\u00adbook \u200fok\u2028next"
        assert clean_intent_text(text) == text


class TestReceiveIntent:
    def test_valid_request(self, settings) -> None:
        intent = receive_intent("  Summarise my week  ", settings=settings)

        assert intent.text == "Summarise my week"
        assert intent.source == "cli"
        assert intent.language == Language.ENGLISH
        assert len(intent.id) == 12

    def test_language_override(self, settings) -> None:
        intent = receive_intent("hola", language=Language.SPANISH, settings=settings)
        assert intent.language == Language.SPANISH

    def test_empty_request_rejected(self, settings) -> None:
        with pytest.raises(InvalidIntentError):
            receive_intent(" \n\t ", settings=settings)

    def test_too_long_request_rejected(self, settings) -> None:
        limited = settings.model_copy(update={"intent_max_chars": 10})
        with pytest.raises(InvalidIntentError, match="limit is 10"):
            receive_intent("x" * 11, settings=limited)

    def test_exactly_at_limit_accepted(self, settings) -> None:
        limited = settings.model_copy(update={"intent_max_chars": 10})
        assert receive_intent("x" * 10, settings=limited).text == "x" * 10


class TestReadIntentText:
    def test_joins_words(self) -> None:
        assert read_intent_text(["plan", "a", "trip"]) == ("plan a trip", "cli")

    def test_dash_reads_stdin(self) -> None:
        text, source = read_intent_text(["-"], io.StringIO("from a pipe\n"))
        assert text == "from a pipe\n"
        assert source == "stdin"

    def test_dash_without_stdin(self) -> None:
        with pytest.raises(InvalidIntentError):
            read_intent_text(["-"], None)
