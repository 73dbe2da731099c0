"""Notes and skills commands."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from adapters.notes_exporter import export_notes_json, export_notes_markdown
from adapters.notes_store import JsonlNotesStore
from cli.ui_components import build_notes_table
from core.config import AppSettings
from core.domain.errors import Software3Error
from core.domain.models import NoteKind
from core.services.outcome_recorder import add_note, promote_to_skill

notes_app = typer.Typer(no_args_is_help=True, help="Inspect and edit the persisted notes.")
skills_app = typer.Typer(no_args_is_help=True, help="Skills promoted from successful outcomes.")

_console = Console()
_err_console = Console(stderr=True)


class ManualKind(str, Enum):
    preference = "preference"
    note = "note"


class ExportFormat(str, Enum):
    json = "json"
    md = "md"


def _store() -> JsonlNotesStore:
    return JsonlNotesStore(AppSettings().notes_path)


def _fail(exc: Exception) -> typer.Exit:
    _err_console.print(f"[red]Error:[/red] {exc}")
    return typer.Exit(code=1)


@notes_app.command("list")
def list_notes(
    kind: Optional[NoteKind] = typer.Option(None, "--kind", "-k", help="Only this kind."),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Newest N entries."),
) -> None:
    """List notes, newest first."""

    try:
        notes = _store().load()
    except Software3Error as exc:
        raise _fail(exc) from exc
    if kind is not None:
        notes = [n for n in notes if n.kind == kind]
    notes = sorted(notes, key=lambda n: n.created_at, reverse=True)[:limit]
    if not notes:
        _console.print("[dim]No notes yet.[/dim]")
        return
    _console.print(build_notes_table(notes))


@notes_app.command("add")
def add(
    text: str = typer.Argument(..., help="Note text."),
    kind: ManualKind = typer.Option(ManualKind.note, "--kind", "-k", help="preference or note."),
    tag: List[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)."),
) -> None:
    """Add a preference or a free note."""

    try:
        note = add_note(text, kind=NoteKind(kind.value), tags=tag, store=_store())
    except Software3Error as exc:
        raise _fail(exc) from exc
    _console.print(f"[green]Added {note.kind.value}[/green] {note.id}")


@notes_app.command("forget")
def forget(note_id: str = typer.Argument(..., help="Note id or unique prefix.")) -> None:
    """Remove a note."""

    store = _store()
    try:
        note = store.find(note_id)
        store.remove(note.id)
    except Software3Error as exc:
        raise _fail(exc) from exc
    _console.print(f"[green]Removed[/green] {note.kind.value} {note.id}")


@notes_app.command("export")
def export(
    output: Path = typer.Argument(..., help="Destination file."),
    fmt: ExportFormat = typer.Option(ExportFormat.json, "--format", "-f"),
) -> None:
    """Export every note as JSON or Markdown."""

    try:
        notes = _store().load()
    except Software3Error as exc:
        raise _fail(exc) from exc
    if fmt == ExportFormat.md:
        path = export_notes_markdown(notes=notes, output_path=output)
    else:
        path = export_notes_json(notes=notes, output_path=output)
    _console.print(f"[green]Exported {len(notes)} notes to[/green] {path}")


@skills_app.command("list")
def list_skills() -> None:
    """List learned skills."""

    try:
        skills = [n for n in _store().load() if n.kind == NoteKind.SKILL]
    except Software3Error as exc:
        raise _fail(exc) from exc
    if not skills:
        _console.print("[dim]No skills yet. Promote a successful outcome with `sw3 skills promote`.[/dim]")
        return
    _console.print(build_notes_table(skills, title="Skills"))


@skills_app.command("promote")
def promote(
    note_id: str = typer.Argument(..., help="Outcome note id or unique prefix."),
    name: str = typer.Option(..., "--name", help="Skill name."),
) -> None:
    """Turn a successful outcome into a reusable skill."""

    store = _store()
    try:
        skill = promote_to_skill(store.find(note_id), name=name, store=store)
    except Software3Error as exc:
        raise _fail(exc) from exc
    _console.print(f"[green]Learned skill[/green] {skill.title!r} ({skill.id})")
