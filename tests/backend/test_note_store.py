"""
Unit tests for the note stores.
"""

import os
import shutil
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from zkindex.errors import NoteNotFound
from zkindex.models import Note
from zkindex.note_store import FileNoteStore, InMemoryNoteStore, compile_pattern


class TestFileNoteStore:
    """Test suite for the directory-backed store."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.notes_dir = Path(self.temp_dir)
        self._write("202401011200 Systems thinking.md", "Stocks and flows.\n")
        self._write("202401021330 Feedback loops.md", "A loop that feeds back.\n")
        self._write("202401031000.md", "Untitled body with stocks.\n")
        self._write("README.md", "not a note")
        self._write("202401041000 Draft.txt", "wrong extension")

        self.store = FileNoteStore(self.notes_dir)

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, name, text):
        (self.notes_dir / name).write_text(text, encoding="utf-8")

    def test_list_all_parses_ids_and_titles(self):
        notes = {note.id: note for note in self.store.list_all()}
        assert set(notes) == {"202401011200", "202401021330", "202401031000"}
        assert notes["202401011200"].title == "Systems thinking"
        assert notes["202401031000"].title == "Untitled"

    def test_metadata_comes_from_file(self):
        path = self.notes_dir / "202401011200 Systems thinking.md"
        os.utime(path, (1700000000, 1700000000))

        metadata = self.store.metadata("202401011200")

        assert metadata.modified_at == 1700000000
        assert metadata.size_bytes == len("Stocks and flows.\n")
        assert metadata.created_at == datetime(2024, 1, 1, 12, 0).timestamp()

    def test_resolve_path(self):
        assert self.store.resolve_path("202401021330") == str(self.notes_dir / "202401021330 Feedback loops.md")

    def test_unknown_id_raises(self):
        with pytest.raises(NoteNotFound):
            self.store.get("209901010000")

    def test_title_matches(self):
        assert self.store.title_matches("loops") == {"202401021330"}
        assert self.store.title_matches("systems") == set()

    def test_content_matches_regexp(self):
        assert self.store.content_matches(r"[Ss]tocks") == {"202401011200", "202401031000"}

    def test_rescans_on_every_call(self):
        self._write("202401051000 Late addition.md", "stocks again")
        assert "202401051000" in self.store.content_matches("stocks")
        (self.notes_dir / "202401031000.md").unlink()
        assert "202401031000" not in {note.id for note in self.store.list_all()}

    def test_missing_directory_is_empty(self):
        store = FileNoteStore(self.notes_dir / "missing")
        assert store.list_all() == []

    def test_custom_id_pattern_and_extension(self):
        self._write("abc-1 Custom.org", "org note")
        store = FileNoteStore(self.notes_dir, extension=".org", id_pattern=r"[a-z]+-\d+")
        notes = store.list_all()
        assert [note.id for note in notes] == ["abc-1"]
        assert notes[0].title == "Custom"


class TestInMemoryNoteStore:
    """Test suite for the in-memory store."""

    def setup_method(self):
        self.note = Note(
            id="202401010000", title="Only", path="/tmp/only.md",
            modified_at=1.0, created_at=2.0, size_bytes=3,
        )
        self.store = InMemoryNoteStore([self.note], {"202401010000": "body text"})

    def test_lookups(self):
        assert self.store.get("202401010000") is self.note
        assert self.store.resolve_path("202401010000") == "/tmp/only.md"
        assert self.store.metadata("202401010000").size_bytes == 3

    def test_matches(self):
        assert self.store.title_matches("^On") == {"202401010000"}
        assert self.store.content_matches("body") == {"202401010000"}
        assert self.store.content_matches("missing") == set()

    def test_remove(self):
        self.store.remove("202401010000")
        assert self.store.list_all() == []
        with pytest.raises(NoteNotFound):
            self.store.get("202401010000")


def test_compile_pattern_falls_back_to_literal():
    assert compile_pattern("a+").search("caaat")
    assert compile_pattern("[unclosed").search("x [unclosed y")
