"""Shared pytest fixtures for software3 tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from adapters.notes_store import JsonlNotesStore
from core.config import AppSettings

# Rich sizes module-level consoles at import time; keep table cells on one line.
os.environ.setdefault("COLUMNS", "200")


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        notes_path=tmp_path / "notes.jsonl",
        capabilities_path=None,
        ai_api_key=None,
        ai_base_url="https://api.example.test/v1",
        ai_model="test-model",
        ai_max_retries=2,
    )


@pytest.fixture
def store(settings: AppSettings) -> JsonlNotesStore:
    return JsonlNotesStore(settings.notes_path)
