"""Persisted notes file (JSON Lines).

Why JSON Lines:
- Appending an outcome is a single write; the file never needs a full rewrite
  on the hot path.
- Each line is a self-contained `Note`, so one corrupt line does not poison
  the rest of the history.

Single writer assumed: there is no cross-process locking.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from core.domain.errors import NoteNotFoundError, NotesStoreError
from core.domain.models import Note

logger = logging.getLogger(__name__)

MIN_PREFIX_LEN = 4


def _dump_line(note: Note) -> str:
    return json.dumps(note.model_dump(mode="json"), ensure_ascii=False, sort_keys=True) + "\n"


class JsonlNotesStore:
    """File-backed implementation of `core.interfaces.notes.NotesRepository`."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.last_skipped = 0

    def _read_lines(self) -> list[bytes]:
        """Raw lines of the file, split on `\\n` only."""

        if not self.path.exists():
            return []
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise NotesStoreError(f"Cannot read notes file {self.path}: {exc}") from exc
        return raw.split(b"\n")

    def _parse(self, line: bytes, lineno: int) -> Note | None:
        try:
            return Note.model_validate_json(line.decode("utf-8"))
        except UnicodeDecodeError as exc:
            reason = f"not UTF-8: {exc.reason}"
        except ValidationError as exc:
            reason = exc.errors()[0]["msg"]
        self.last_skipped += 1
        logger.warning("Skipping invalid note at %s:%d (%s)", self.path, lineno, reason)
        return None

    def load(self) -> list[Note]:
        """Return every valid note in file order (oldest first)."""

        self.last_skipped = 0
        notes: list[Note] = []
        for lineno, line in enumerate(self._read_lines(), start=1):
            if not line.strip():
                continue
            note = self._parse(line, lineno)
            if note is not None:
                notes.append(note)
        return notes

    def append(self, note: Note) -> Note:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(_dump_line(note))
        except OSError as exc:
            raise NotesStoreError(f"Cannot write notes file {self.path}: {exc}") from exc
        logger.debug("Appended %s note %s", note.kind.value, note.id)
        return note

    def find(self, id_or_prefix: str) -> Note:
        """Lookup by exact id or unique prefix."""

        key = (id_or_prefix or "").strip()
        notes = self.load()
        for note in notes:
            if note.id == key:
                return note
        if len(key) < MIN_PREFIX_LEN:
            raise NoteNotFoundError(f"No note with id {key!r}")

        matches = [n for n in notes if n.id.startswith(key)]
        if not matches:
            raise NoteNotFoundError(f"No note with id {key!r}")
        if len(matches) > 1:
            raise NotesStoreError(f"Ambiguous id prefix {key!r} ({len(matches)} notes match)")
        return matches[0]

    def remove(self, note_id: str) -> bool:
        """Drop the note with `note_id`; unreadable lines are kept as they are."""

        self.last_skipped = 0
        kept: list[bytes] = []
        removed = False
        for lineno, line in enumerate(self._read_lines(), start=1):
            if not line.strip():
                continue
            note = self._parse(line, lineno)
            if note is not None and note.id == note_id:
                removed = True
                continue
            kept.append(line)
        if not removed:
            return False
        self._rewrite(kept)
        logger.debug("Removed note %s", note_id)
        return True

    def _rewrite(self, lines: list[bytes]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".notes-", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "wb") as fh:
                for line in lines:
                    fh.write(line + b"\n")
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise NotesStoreError(f"Cannot rewrite notes file {self.path}: {exc}") from exc
