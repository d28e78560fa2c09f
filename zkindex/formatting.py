"""Turn a view state into display rows.

Rendering is a projection of ``ViewState.visible_ids``; nothing here feeds
back into the state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List

from zkindex.models import Note
from zkindex.note_store import NoteStore
from zkindex.view_controller import ViewState

Formatter = Callable[[Note], str]

DEFAULT_FORMAT = "%t [[%i]]"

_PLACEHOLDER = re.compile(r"%(.)")
_ID_SLOT = re.compile(r"\s*(?:\[\[)?%i(?:\]\])?")


class TemplateFormatter:
    """Expand ``%t`` (title) and ``%i`` (id) in a template; ``%%`` is a literal percent."""

    def __init__(self, template: str = DEFAULT_FORMAT, show_ids: bool = True):
        self.show_ids = show_ids
        self.template = template if show_ids else _ID_SLOT.sub("", template)

    def __call__(self, note: Note) -> str:
        def expand(match: re.Match) -> str:
            key = match.group(1)
            if key == "t":
                return note.title
            if key == "i":
                return note.id
            if key == "%":
                return "%"
            return match.group(0)

        text = _PLACEHOLDER.sub(expand, self.template)
        return text if self.show_ids else text.strip()


@dataclass(frozen=True)
class Row:
    line: int
    note_id: str
    text: str
    current: bool = False


def render_rows(state: ViewState, store: NoteStore, formatter: Formatter) -> List[Row]:
    notes = {note.id: note for note in store.list_all()}
    rows: List[Row] = []
    for line, note_id in enumerate(state.visible_ids, start=1):
        note = notes.get(note_id)
        if note is None:
            continue
        rows.append(
            Row(
                line=line,
                note_id=note_id,
                text=formatter(note),
                current=line == state.cursor_line,
            )
        )
    return rows
