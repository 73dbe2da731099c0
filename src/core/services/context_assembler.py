"""Context assembly.

Builds the prompt forwarded to the agent from the accumulated notes file:
preferences first, then learned skills, then the notes and past outcomes
that share the most keywords with the request. Everything is bounded by a
character budget so a long history never produces an oversized prompt.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from core.config import AppSettings
from core.domain.models import AssembledContext, Intent, Note, NoteKind
from core.text import shorten

_WORD_RE = re.compile(r"\w+", re.UNICODE)

_STOPWORDS = frozenset(
    {
        "the", "and", "for", "with", "that", "this", "from", "have", "are", "was", "were",
        "you", "your", "but", "not", "all", "any", "can", "will", "would", "should", "could",
        "into", "about", "what", "when", "where", "which", "how", "why", "who", "please",
        "los", "las", "una", "uno", "por", "para", "con", "que", "del", "como", "pero",
    }
)

ROLE_PROMPT = (
    "You are the runtime of a Software 3.0 application: users state what they want in plain "
    "language and you produce the result directly. Use the user's preferences and the notes "
    "below as accumulated context from earlier sessions. Prefer reusing a learned skill when one "
    "fits the request. Be concise and state clearly when you cannot complete something."
)


def keywords(text: str) -> set[str]:
    return {
        w
        for w in _WORD_RE.findall((text or "").lower())
        if len(w) >= 3 and w not in _STOPWORDS and not w.isdigit()
    }


def rank_notes(intent: Intent, notes: Iterable[Note]) -> list[Note]:
    """Order notes by keyword overlap with the intent, newest first on ties."""

    wanted = keywords(intent.text)
    scored = [(len(wanted & keywords(n.text)), n) for n in notes]
    scored.sort(key=lambda item: (item[0], item[1].created_at), reverse=True)
    return [n for _, n in scored]


@dataclass
class _Budget:
    remaining: int
    included: list[str] = field(default_factory=list)
    dropped: int = 0

    def take(self, note: Note, line: str) -> bool:
        cost = len(line) + 1
        if cost > self.remaining:
            self.dropped += 1
            return False
        self.remaining -= cost
        self.included.append(note.id)
        return True


def _render_note(note: Note, max_chars: int) -> str:
    if note.kind == NoteKind.SKILL:
        return f"- {note.title or note.id}: {shorten(note.text, max_chars)}"
    if note.kind == NoteKind.PREFERENCE:
        return f"- {shorten(note.text, max_chars)}"
    stamp = note.created_at.date().isoformat()
    return f"- [{note.kind.value} {stamp}] {shorten(note.text, max_chars)}"


def _section(title: str, lines: list[str]) -> str:
    return f"## {title}\n" + "\n".join(lines)


def assemble_context(
    intent: Intent,
    notes: Sequence[Note],
    *,
    settings: AppSettings | None = None,
    capabilities: Sequence[str] = (),
) -> AssembledContext:
    settings = settings or AppSettings()
    budget = _Budget(remaining=settings.context_max_chars)
    max_chars = settings.note_max_chars

    def newest_first(kind: NoteKind) -> list[Note]:
        return sorted((n for n in notes if n.kind == kind), key=lambda n: n.created_at, reverse=True)

    pref_lines: list[str] = []
    for note in newest_first(NoteKind.PREFERENCE):
        line = _render_note(note, max_chars)
        if budget.take(note, line):
            pref_lines.append(line)

    skill_lines: list[str] = []
    for note in newest_first(NoteKind.SKILL):
        line = _render_note(note, max_chars)
        if budget.take(note, line):
            skill_lines.append(line)

    ranked = rank_notes(intent, (n for n in notes if n.kind in (NoteKind.NOTE, NoteKind.OUTCOME)))
    cap = settings.context_max_notes
    budget.dropped += max(0, len(ranked) - cap)
    note_lines: list[str] = []
    for note in ranked[:cap]:
        line = _render_note(note, max_chars)
        if budget.take(note, line):
            note_lines.append(line)

    sections = [ROLE_PROMPT, intent.language.reply_instruction()]
    if pref_lines:
        sections.append(_section("Preferences", pref_lines))
    if skill_lines:
        sections.append(_section("Learned skills", skill_lines))
    if note_lines:
        sections.append(_section("Relevant notes", note_lines))
    capability_names = [c for c in capabilities if c]
    if capability_names:
        sections.append(_section("Available capabilities", [f"- {c}" for c in capability_names]))
    system_prompt = "\n\n".join(sections)

    return AssembledContext(
        intent=intent,
        system_prompt=system_prompt,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": intent.text},
        ],
        included_note_ids=budget.included,
        dropped_note_count=budget.dropped,
        capabilities=capability_names,
    )
