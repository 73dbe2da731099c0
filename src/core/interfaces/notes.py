"""Contract for the notes repository used by services."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Note


@runtime_checkable
class NotesRepository(Protocol):
    def load(self) -> list[Note]:
        ...

    def append(self, note: Note) -> Note:
        ...

    def find(self, id_or_prefix: str) -> Note:
        ...

    def remove(self, note_id: str) -> bool:
        ...
