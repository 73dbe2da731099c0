"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.agent_invoker import is_local_base_url
from adapters.capabilities import load_capabilities
from adapters.http_client import check_reachable
from adapters.notes_store import JsonlNotesStore
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import Software3Error

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

PRESETS: dict[str, dict[str, str]] = {
    "openai": {"SW3_AI_BASE_URL": "https://api.openai.com/v1", "SW3_AI_MODEL": "gpt-4o-mini"},
    "deepseek": {"SW3_AI_BASE_URL": "https://api.deepseek.com", "SW3_AI_MODEL": "deepseek-chat"},
    "groq": {"SW3_AI_BASE_URL": "https://api.groq.com/openai/v1", "SW3_AI_MODEL": "llama-3.1-70b-versatile"},
    "openrouter": {"SW3_AI_BASE_URL": "https://openrouter.ai/api/v1", "SW3_AI_MODEL": "openai/gpt-4o-mini"},
    "ollama": {"SW3_AI_BASE_URL": "http://localhost:11434/v1", "SW3_AI_MODEL": "llama3"},
}


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="software3 Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if settings.ai_api_key:
        table.add_row("AI key", "OK", "Remote agent enabled")
    elif is_local_base_url(settings.ai_base_url):
        table.add_row("AI key", "OK", "Local provider, no key needed")
    else:
        table.add_row("AI key", "OPTIONAL", "No key set -> offline mode")
    table.add_row("AI base_url", "OK", settings.ai_base_url)
    table.add_row("AI model", "OK", settings.ai_model)

    store = JsonlNotesStore(settings.notes_path)
    try:
        notes = store.load()
        detail = f"{len(notes)} notes in {settings.notes_path}"
        if store.last_skipped:
            detail += f" ({store.last_skipped} unreadable lines)"
        status = "WARN" if store.last_skipped else ("OK" if settings.notes_path.exists() else "NEW")
        table.add_row("Notes file", status, detail)
    except Software3Error as exc:
        table.add_row("Notes file", "FAIL", str(exc))

    if settings.capabilities_path is None:
        table.add_row("Capabilities", "OPTIONAL", "No manifest configured")
    else:
        try:
            names = load_capabilities(settings.capabilities_path).names()
            table.add_row("Capabilities", "OK", ", ".join(names) or "(empty manifest)")
        except Software3Error as exc:
            table.add_row("Capabilities", "FAIL", str(exc))

    ok_http, detail_http = asyncio.run(check_reachable(settings.ai_base_url, settings=settings))
    table.add_row("Provider reachable", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)


@app.command(name="setup-ai")
def setup_ai() -> None:
    """Interactive AI setup (stores config in the user config .env)."""

    provider = typer.prompt("AI provider", default="openai", show_default=True).strip().lower()

    values = PRESETS.get(provider, {}).copy()
    if not values:
        _console.print("[yellow]Unknown provider preset. You can still enter custom values.[/yellow]")

    base_url = typer.prompt("AI base URL", default=values.get("SW3_AI_BASE_URL", ""), show_default=True).strip()
    model = typer.prompt("AI model", default=values.get("SW3_AI_MODEL", ""), show_default=True).strip()
    api_key = typer.prompt("AI API key", default="", hide_input=True, show_default=False).strip()

    if not base_url or not model:
        raise typer.BadParameter("base_url and model are required")

    env_path = write_user_env_vars(
        {
            "SW3_AI_BASE_URL": base_url,
            "SW3_AI_MODEL": model,
            "SW3_AI_API_KEY": api_key or None,
        }
    )

    _console.print(f"[green]Saved AI config to:[/green] {env_path}")
