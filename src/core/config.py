"""Core configuration.

Why here:
- Centralises environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (notes file, AI provider) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "software3"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "software3"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "software3"
    return Path.home() / ".config" / "software3"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def default_notes_path() -> Path:
    return get_user_config_dir() / "notes.jsonl"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# software3 user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed, validated at the edge (env vars) without putting that logic in the core.
    - A single configuration contract for CLI, services and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="SW3_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    notes_path: Path = Field(
        default_factory=default_notes_path,
        description="JSON Lines file holding preferences, notes, outcomes and skills.",
    )
    capabilities_path: Path | None = Field(
        default=None,
        description="Optional MCP-style JSON manifest listing servers/tools advertised to the agent.",
    )

    ai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible provider.",
    )
    ai_base_url: str = Field(
        default="https://api.openai.com/v1",
        min_length=8,
        description="OpenAI-compatible base URL.",
    )
    ai_model: str = Field(
        default="gpt-4o-mini",
        min_length=1,
        description="Model used for every request.",
    )
    ai_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    ai_max_tokens: int = Field(default=1500, ge=16, le=32_000)
    ai_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for provider calls (seconds).",
    )
    ai_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum retries on transient failures (rate limit, network).",
    )

    http_timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = Field(default="software3/0.1 (+https://local)", min_length=1)

    intent_max_chars: int = Field(default=8000, ge=1, le=200_000)
    context_max_chars: int = Field(
        default=12_000,
        ge=200,
        description="Character budget for notes rendered into the system prompt.",
    )
    context_max_notes: int = Field(
        default=12,
        ge=0,
        le=200,
        description="Cap on ranked notes/outcomes included per request.",
    )
    note_max_chars: int = Field(default=600, ge=40, le=20_000)
    outcome_summary_chars: int = Field(default=400, ge=40, le=4000)

    default_language: Language = Field(
        default=Language.ENGLISH,
        description="Default reply language (en/es).",
    )
    log_level: str = Field(default="WARNING", description="Root log level for the rich log handler.")
