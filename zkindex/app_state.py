"""Service-wide state: settings, the note store and the index view."""

from __future__ import annotations

import threading
from typing import Any, List, Mapping, Optional

from zkindex.config import IndexSettings, load_settings
from zkindex.formatting import Formatter, TemplateFormatter, render_rows
from zkindex.models import (
    HistoryResponsePayload,
    NotePayload,
    QueryTermPayload,
    RowPayload,
    ViewPayload,
)
from zkindex.note_store import FileNoteStore, NoteStore
from zkindex.view_controller import ViewController


class IndexAppState:
    """Holds the note store and the single index view.

    Commands run one at a time under ``_lock``; the store is only consulted
    while the lock is held.
    """

    def __init__(
        self,
        settings: Optional[IndexSettings] = None,
        store: Optional[NoteStore] = None,
        formatter: Optional[Formatter] = None,
    ):
        self._lock = threading.RLock()
        self.settings = settings or load_settings()
        self.store = store or FileNoteStore(
            root=self.settings.notes_dir,
            extension=self.settings.extension,
            id_pattern=self.settings.id_pattern,
        )
        self.formatter = formatter or TemplateFormatter(
            self.settings.index_format, show_ids=self.settings.show_ids
        )
        self.controller = ViewController(self.store, default_sort=self.settings.default_sort)

    def dispatch(self, name: str, args: Optional[Mapping[str, Any]] = None) -> Optional[ViewPayload]:
        with self._lock:
            self.controller.on_command(name, args)
            return self._snapshot()

    def view(self) -> Optional[ViewPayload]:
        with self._lock:
            return self._snapshot()

    def note_at_cursor(self) -> Optional[NotePayload]:
        with self._lock:
            note = self.controller.note_at_cursor()
            if note is None:
                return None
            return NotePayload(
                id=note.id,
                title=note.title,
                path=note.path,
                modified_at=note.modified_at,
                created_at=note.created_at,
                size_bytes=note.size_bytes,
            )

    def history(self) -> HistoryResponsePayload:
        with self._lock:
            terms: List[QueryTermPayload] = [
                QueryTermPayload(kind=query.kind, term=query.term)
                for query in self.controller.history()
            ]
            return HistoryResponsePayload(terms=terms)

    def _snapshot(self) -> Optional[ViewPayload]:
        state = self.controller.state
        if state is None:
            return None
        rows = render_rows(state, self.store, self.formatter)
        return ViewPayload(
            visible_ids=list(state.visible_ids),
            rows=[
                RowPayload(line=row.line, note_id=row.note_id, text=row.text, current=row.current)
                for row in rows
            ],
            breadcrumb=state.breadcrumb,
            sort_mode=state.sort_mode,
            cursor_line=state.cursor_line,
            narrowed=self.controller.is_narrowed(),
        )
