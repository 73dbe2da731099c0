"""Tests for the JSON Lines notes store."""

from __future__ import annotations

import json

import pytest

from adapters.notes_store import JsonlNotesStore
from core.domain.errors import NoteNotFoundError, NotesStoreError
from core.domain.models import Note, NoteKind
from tests.helpers import make_note


class TestJsonlNotesStore:
    def test_missing_file_is_empty(self, store) -> None:
        assert store.load() == []
        assert store.last_skipped == 0

    def test_append_creates_parents_and_keeps_order(self, tmp_path) -> None:
        store = JsonlNotesStore(tmp_path / "deep" / "dir" / "notes.jsonl")
        first = store.append(make_note("first"))
        second = store.append(make_note("second", NoteKind.PREFERENCE))

        loaded = store.load()
        assert [n.id for n in loaded] == [first.id, second.id]
        assert loaded[1].kind == NoteKind.PREFERENCE

    def test_one_line_per_note_utf8(self, store) -> None:
        store.append(make_note("café ☕"))
        raw = store.path.read_text(encoding="utf-8")
        assert raw.count("\n") == 1
        assert "café ☕" in raw
        assert json.loads(raw)["text"] == "café ☕"

    def test_invalid_lines_are_skipped(self, store) -> None:
        good = store.append(make_note("good"))
        with store.path.open("a", encoding="utf-8") as fh:
            fh.write("{not json}\n")
            fh.write(json.dumps({"kind": "note"}) + "\n")
            fh.write("\n")

        loaded = store.load()
        assert [n.id for n in loaded] == [good.id]
        assert store.last_skipped == 2

    def test_find_by_id_and_prefix(self, store) -> None:
        note = store.append(Note(id="abcdef123456", text="x"))
        assert store.find("abcdef123456").id == note.id
        assert store.find("abcd").id == note.id

    def test_find_short_prefix_is_not_found(self, store) -> None:
        store.append(Note(id="abcdef123456", text="x"))
        with pytest.raises(NoteNotFoundError):
            store.find("abc")

    def test_find_ambiguous_prefix(self, store) -> None:
        store.append(Note(id="abcd00000001", text="x"))
        store.append(Note(id="abcd00000002", text="y"))
        with pytest.raises(NotesStoreError, match="Ambiguous"):
            store.find("abcd")

    def test_find_unknown(self, store) -> None:
        with pytest.raises(NoteNotFoundError):
            store.find("ffffffff")

    def test_remove(self, store) -> None:
        keep = store.append(make_note("keep"))
        drop = store.append(make_note("drop"))

        assert store.remove(drop.id) is True
        assert [n.id for n in store.load()] == [keep.id]
        assert store.remove(drop.id) is False
        assert not list(store.path.parent.glob(".notes-*.tmp"))

    def test_line_separator_characters_survive_reload(self, store) -> None:
        note = store.append(make_note("copied text\u2028second line\u2029third\x85end"))

        loaded = store.load()
        assert [n.id for n in loaded] == [note.id]
        assert loaded[0].text == "copied text\u2028second line\u2029third\x85end"
        assert store.last_skipped == 0

    def test_non_utf8_line_is_skipped(self, store) -> None:
        good = store.append(make_note("good"))
        with store.path.open("ab") as fh:
            fh.write(b'{"text": "\xff"}\n')

        assert [n.id for n in store.load()] == [good.id]
        assert store.last_skipped == 1

    def test_remove_keeps_unreadable_lines(self, store) -> None:
        keep = store.append(make_note("keep"))
        drop = store.append(make_note("drop"))
        bad_date = json.dumps({"id": "handedit01", "text": "hand edited", "created_at": "yesterday"})
        with store.path.open("ab") as fh:
            fh.write(bad_date.encode("utf-8") + b"\n")
            fh.write(b'{"text": "\xff"}\n')

        assert store.remove(drop.id) is True

        raw = store.path.read_bytes()
        assert b"hand edited" in raw
        assert b'{"text": "\xff"}' in raw
        assert [n.id for n in store.load()] == [keep.id]
        assert store.last_skipped == 2
