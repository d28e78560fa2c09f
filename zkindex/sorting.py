"""Sort functions for note listings.

All orders are descending and stable: notes with equal keys keep their
relative input order. Listings with fewer than two notes are handed back
untouched.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Callable, Dict, Sequence

from zkindex.models import Note, SortMode

Sorter = Callable[[Sequence[Note]], Sequence[Note]]

DEFAULT_SORT = SortMode.MODIFIED


def _descending(notes: Sequence[Note], key: Callable[[Note], object]) -> Sequence[Note]:
    if len(notes) < 2:
        return notes
    return sorted(notes, key=key, reverse=True)


def by_modified(notes: Sequence[Note]) -> Sequence[Note]:
    return _descending(notes, attrgetter("modified_at"))


def by_created(notes: Sequence[Note]) -> Sequence[Note]:
    # Ids are timestamp-prefixed, so the id string orders by creation instant.
    return _descending(notes, attrgetter("id"))


def by_size(notes: Sequence[Note]) -> Sequence[Note]:
    return _descending(notes, attrgetter("size_bytes"))


def keep_order(notes: Sequence[Note]) -> Sequence[Note]:
    return notes


SORTERS: Dict[SortMode, Sorter] = {
    SortMode.MODIFIED: by_modified,
    SortMode.CREATED: by_created,
    SortMode.SIZE: by_size,
    SortMode.NONE: keep_order,
}


def sorter_for(mode: SortMode | None) -> Sorter:
    return SORTERS[mode or DEFAULT_SORT]


def sort_notes(notes: Sequence[Note], mode: SortMode | None = None) -> Sequence[Note]:
    return sorter_for(mode)(notes)
