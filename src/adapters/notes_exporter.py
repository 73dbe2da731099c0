"""Notes export (JSON and Markdown).

Why it lives in adapters:
- Markdown rendering is an infrastructure detail (Jinja2).
- The core only knows `Note`; exporters decide how it looks on disk.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.models import Note, NoteKind

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_KIND_ORDER = (NoteKind.PREFERENCE, NoteKind.SKILL, NoteKind.NOTE, NoteKind.OUTCOME)


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        keep_trailing_newline=True,
    )


def export_notes_json(*, notes: Iterable[Note], output_path: Path) -> Path:
    """Export notes as a UTF-8 JSON array with stable formatting."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [n.model_dump(mode="json") for n in notes]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path


def render_notes_markdown(*, notes: Iterable[Note]) -> str:
    notes = list(notes)
    groups = []
    for kind in _KIND_ORDER:
        items = sorted((n for n in notes if n.kind == kind), key=lambda n: n.created_at)
        if items:
            groups.append((kind.value, items))

    template = _get_env().get_template("notes.md.j2")
    return template.render(
        notes=notes,
        groups=groups,
        generated_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
    )


def export_notes_markdown(*, notes: Iterable[Note], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_notes_markdown(notes=notes), encoding="utf-8")
    return output_path
