"""Tests for context assembly."""

from __future__ import annotations

from core.domain.language import Language
from core.domain.models import Intent, NoteKind
from core.services.context_assembler import ROLE_PROMPT, assemble_context, keywords, rank_notes
from tests.helpers import make_note


def _intent(text: str, language: Language = Language.ENGLISH) -> Intent:
    return Intent(text=text, language=language)


class TestKeywords:
    def test_drops_short_words_stopwords_and_numbers(self) -> None:
        assert keywords("How do I deploy the API to staging in 2026?") == {"deploy", "api", "staging"}


class TestRankNotes:
    def test_overlap_first_then_recency(self) -> None:
        old_match = make_note("staging deploy checklist", days_ago=30)
        new_match = make_note("deploy to staging on fridays", days_ago=1)
        unrelated = make_note("grocery list", days_ago=0)

        ranked = rank_notes(_intent("deploy staging"), [old_match, unrelated, new_match])

        assert ranked == [new_match, old_match, unrelated]


class TestAssembleContext:
    def test_empty_notes_gives_role_and_language_only(self, settings) -> None:
        ctx = assemble_context(_intent("hello there"), [], settings=settings)

        assert ctx.system_prompt.startswith(ROLE_PROMPT)
        assert "Always reply in English." in ctx.system_prompt
        assert "## " not in ctx.system_prompt
        assert ctx.messages == [
            {"role": "system", "content": ctx.system_prompt},
            {"role": "user", "content": "hello there"},
        ]
        assert ctx.included_note_ids == []
        assert ctx.dropped_note_count == 0

    def test_sections_in_priority_order(self, settings) -> None:
        pref = make_note("Use metric units", NoteKind.PREFERENCE)
        skill = make_note("Request: weekly report\nOutcome: done", NoteKind.SKILL, title="weekly-report")
        note = make_note("The weekly report goes to Ana", NoteKind.NOTE)

        ctx = assemble_context(
            _intent("write the weekly report"),
            [note, skill, pref],
            settings=settings,
            capabilities=["github", "Read"],
        )

        prompt = ctx.system_prompt
        assert prompt.index("## Preferences") < prompt.index("## Learned skills")
        assert prompt.index("## Learned skills") < prompt.index("## Relevant notes")
        assert prompt.index("## Relevant notes") < prompt.index("## Available capabilities")
        assert "- weekly-report: Request: weekly report Outcome: done" in prompt
        assert "- Use metric units" in prompt
        assert "- github" in prompt
        assert ctx.included_note_ids == [pref.id, skill.id, note.id]
        assert ctx.capabilities == ["github", "Read"]

    def test_spanish_reply_instruction(self, settings) -> None:
        ctx = assemble_context(_intent("hola", Language.SPANISH), [], settings=settings)
        assert "Responde siempre en español neutro." in ctx.system_prompt

    def test_count_cap_drops_lowest_ranked(self, settings) -> None:
        capped = settings.model_copy(update={"context_max_notes": 2})
        notes = [make_note(f"budget item {i}", days_ago=i) for i in range(5)]

        ctx = assemble_context(_intent("budget"), notes, settings=capped)

        assert ctx.included_note_ids == [notes[0].id, notes[1].id]
        assert ctx.dropped_note_count == 3

    def test_char_budget_skips_notes_that_do_not_fit(self, settings) -> None:
        tight = settings.model_copy(update={"context_max_chars": 200, "note_max_chars": 600})
        pref = make_note("short pref", NoteKind.PREFERENCE)
        huge = make_note("travel " + "x" * 400, days_ago=0)
        small = make_note("travel tip", days_ago=5)

        ctx = assemble_context(_intent("travel plans"), [pref, huge, small], settings=tight)

        assert pref.id in ctx.included_note_ids
        assert small.id in ctx.included_note_ids
        assert huge.id not in ctx.included_note_ids
        assert ctx.dropped_note_count == 1

    def test_long_notes_are_truncated(self, settings) -> None:
        short = settings.model_copy(update={"note_max_chars": 40})
        note = make_note("alpha " * 50)

        ctx = assemble_context(_intent("alpha"), [note], settings=short)

        line = next(l for l in ctx.system_prompt.splitlines() if l.startswith("- [note"))
        assert line.endswith("…")
