"""software3 command line.

`sw3 ask ...` is the whole loop in one command: the request is received,
context is assembled from the notes file, the agent's reply is streamed to
the terminal, and a summary is appended to the notes for next time.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import List, Optional

import typer
from rich.console import Console

from adapters.agent_invoker import build_invoker
from adapters.notes_store import JsonlNotesStore
from cli import doctor, notes
from cli.ui_components import build_context_panel, build_outcome_panel, print_banner
from core.config import AppSettings
from core.domain.errors import InvalidIntentError, Software3Error
from core.domain.language import Language
from core.domain.models import AgentEvent, AgentEventType
from core.log_setup import configure_logging
from core.services.intent_receiver import read_intent_text
from core.services.session_pipeline import PipelineHooks, SessionRequest, preview_context, run_session

app = typer.Typer(no_args_is_help=True, help="Intent-driven agent runtime with persistent notes.")
app.add_typer(notes.notes_app, name="notes")
app.add_typer(notes.skills_app, name="skills")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


def _read_request(words: List[str]) -> tuple[str, str]:
    try:
        return read_intent_text(words, sys.stdin)
    except InvalidIntentError as exc:
        _err_console.print(f"[red]Invalid request:[/red] {exc}")
        raise typer.Exit(code=2) from exc


class _StreamRenderer:
    """Hook target that prints events as they arrive."""

    def __init__(self, console: Console, err_console: Console, *, quiet: bool) -> None:
        self._console = console
        self._err = err_console
        self._quiet = quiet
        self.streamed_text = False

    def __call__(self, event: AgentEvent) -> None:
        if event.type == AgentEventType.TEXT:
            self.streamed_text = True
            self._console.print(event.content, end="", markup=False, highlight=False, soft_wrap=True)
        elif event.type == AgentEventType.RESULT:
            if self.streamed_text:
                self._console.print()
            else:
                self._console.print(event.content, markup=False, highlight=False, soft_wrap=True)
        elif event.type == AgentEventType.STATUS:
            if not self._quiet:
                self._err.print(f"[dim]{event.content}[/dim]")
        elif event.type == AgentEventType.ERROR:
            if self.streamed_text:
                self._console.print()
            self._err.print(f"[red]Agent error:[/red] {event.content}")


@app.command()
def ask(
    words: List[str] = typer.Argument(..., help="The request, in plain language. Use '-' to read it from stdin."),
    language: Optional[Language] = typer.Option(None, "--language", "-l", help="Reply language."),
    no_record: bool = typer.Option(False, "--no-record", help="Do not append the outcome to the notes file."),
    as_json: bool = typer.Option(False, "--json", help="Print only the outcome as JSON."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner, status lines or outcome panel."),
) -> None:
    """Send a request to the agent and record what happened."""

    settings = AppSettings()
    text, source = _read_request(words)
    store = JsonlNotesStore(settings.notes_path)
    invoker = build_invoker(settings)

    renderer = _StreamRenderer(_console, _err_console, quiet=quiet)
    hooks = PipelineHooks(
        on_event=None if as_json else renderer,
        warning=lambda msg: _err_console.print(f"[yellow]Warning:[/yellow] {msg}"),
    )
    if not (as_json or quiet):
        print_banner(_console)

    request = SessionRequest(text=text, source=source, language=language, record=not no_record)
    try:
        result = asyncio.run(run_session(request, settings=settings, store=store, invoker=invoker, hooks=hooks))
    except InvalidIntentError as exc:
        _err_console.print(f"[red]Invalid request:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    except Software3Error as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    note_id = result.recorded.id if result.recorded else None
    if as_json:
        payload = result.outcome.model_dump(mode="json")
        payload["note_id"] = note_id
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))
    elif not quiet:
        _console.print(build_outcome_panel(result.outcome, note_id=note_id))

    if not result.outcome.success:
        raise typer.Exit(code=1)


@app.command()
def context(
    words: List[str] = typer.Argument(..., help="The request to preview. Use '-' to read it from stdin."),
    language: Optional[Language] = typer.Option(None, "--language", "-l"),
) -> None:
    """Show the prompt that would be sent for a request, without calling the agent."""

    settings = AppSettings()
    text, source = _read_request(words)
    store = JsonlNotesStore(settings.notes_path)
    try:
        assembled = preview_context(
            SessionRequest(text=text, source=source, language=language, record=False),
            settings=settings,
            store=store,
        )
    except InvalidIntentError as exc:
        _err_console.print(f"[red]Invalid request:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    except Software3Error as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    _console.print(build_context_panel(assembled))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
