"""
Unit tests for row formatting.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from zkindex.formatting import TemplateFormatter, render_rows
from zkindex.models import Note
from zkindex.note_store import InMemoryNoteStore
from zkindex.view_controller import ViewController


def make_note(note_id, title, modified_at):
    return Note(
        id=note_id, title=title, path=f"/notes/{note_id}.md",
        modified_at=modified_at, created_at=0.0, size_bytes=0,
    )


class TestTemplateFormatter:
    """Test suite for TemplateFormatter."""

    def setup_method(self):
        self.note = make_note("202401010000", "Systems thinking", 1.0)

    def test_default_template(self):
        assert TemplateFormatter()(self.note) == "Systems thinking [[202401010000]]"

    def test_custom_template(self):
        formatter = TemplateFormatter("%i | %t (100%%)")
        assert formatter(self.note) == "202401010000 | Systems thinking (100%)"

    def test_hidden_ids(self):
        assert TemplateFormatter(show_ids=False)(self.note) == "Systems thinking"
        assert TemplateFormatter("%i %t", show_ids=False)(self.note) == "Systems thinking"

    def test_unknown_placeholder_is_kept(self):
        assert TemplateFormatter("%t %x")(self.note) == "Systems thinking %x"


class TestRenderRows:
    """Test suite for render_rows."""

    def test_rows_follow_visible_order_and_cursor(self):
        store = InMemoryNoteStore([
            make_note("202401010000", "Old", 1.0),
            make_note("202401020000", "New", 2.0),
        ])
        controller = ViewController(store)
        controller.open()
        state = controller.next_line()

        rows = render_rows(state, store, TemplateFormatter("%t"))

        assert [(row.line, row.note_id, row.text, row.current) for row in rows] == [
            (1, "202401020000", "New", False),
            (2, "202401010000", "Old", True),
        ]
        assert controller.state is state
