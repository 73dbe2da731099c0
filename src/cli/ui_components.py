"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables and panels are reused by several commands.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AssembledContext, InteractionOutcome, Note, NoteKind
from core.text import shorten


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in JSON/quiet modes)."""

    title = Text("software3", style="bold cyan")
    subtitle = Text("Intent • Context • Agent • Memory", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_notes_table(notes: Iterable[Note], *, title: str = "Notes") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta", no_wrap=True)
    table.add_column("Created", style="dim", no_wrap=True)
    table.add_column("Text", style="white")
    table.add_column("Tags", style="green")
    for note in notes:
        label = note.text if note.kind != NoteKind.SKILL else f"{note.title}: {note.text}"
        table.add_row(
            note.id,
            note.kind.value,
            note.created_at.strftime("%Y-%m-%d %H:%M"),
            shorten(label, 90),
            ", ".join(note.tags),
        )
    return table


def build_context_panel(context: AssembledContext) -> Panel:
    body = Text()
    body.append(context.system_prompt.strip() + "\n\n")
    body.append(
        f"Notes included: {len(context.included_note_ids)} · dropped: {context.dropped_note_count}",
        style="dim",
    )
    return Panel(body, title=Text("Assembled context", style="bold blue"), border_style="blue")


def build_outcome_panel(outcome: InteractionOutcome, *, note_id: str | None = None) -> Panel:
    style = "green" if outcome.success else "red"
    body = Text()
    body.append(("Succeeded" if outcome.success else "Failed") + "\n", style=f"bold {style}")
    body.append(outcome.summary + "\n")
    if outcome.model:
        body.append(f"\nModel: {outcome.model}", style="dim")
    total = outcome.usage.get("total_tokens") if outcome.usage else None
    if total is not None:
        body.append(f"\nTokens: {total}", style="dim")
    body.append(f"\nDuration: {outcome.duration_seconds:.2f}s", style="dim")
    if note_id:
        body.append(f"\nRecorded as note {note_id}", style="dim")
    return Panel(body, title=Text("Outcome", style=f"bold {style}"), border_style=style)
