"""The index view: visible notes, sort, narrowing and cursor.

A ``ViewController`` owns at most one live ``ViewState``. Each command builds
a new state and swaps it in only once every store lookup has succeeded, so a
failing command leaves the previous state in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from zkindex.errors import InvalidArgument, InvalidContext, NoMatches, NotNarrowed, UnknownCommand
from zkindex.models import Note, QueryKind, QueryTerm, SortMode
from zkindex.note_store import NoteStore
from zkindex.query_engine import apply_query, recompose
from zkindex.query_stack import QueryStack
from zkindex.sorting import DEFAULT_SORT, SORTERS, Sorter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    visible_ids: Tuple[str, ...]
    sort_mode: SortMode
    query_stack: QueryStack = QueryStack()
    cursor_line: int = 1
    breadcrumb: Optional[str] = None
    # Shorter than the corpus when built; an explicit list stays pinned on refresh.
    narrowed: bool = False
    sorter: Optional[Sorter] = field(default=None, compare=False, repr=False)

    @property
    def current_id(self) -> Optional[str]:
        if not self.visible_ids:
            return None
        return self.visible_ids[self.cursor_line - 1]


def _clamp(line: int, length: int) -> int:
    return max(1, min(line, length))


class ViewController:
    """Runs the open/refresh/narrow/sort/close commands against a note store."""

    def __init__(
        self,
        store: NoteStore,
        default_sort: SortMode = DEFAULT_SORT,
        sorters: Optional[Mapping[SortMode, Sorter]] = None,
    ):
        self.store = store
        self.default_sort = default_sort
        self.default_sorter: Optional[Sorter] = None
        self._sorters: Dict[SortMode, Sorter] = dict(SORTERS)
        self._sorters.update(sorters or {})
        self._state: Optional[ViewState] = None
        self._history: List[QueryTerm] = []
        self._commands: Dict[str, Callable[[Mapping[str, Any]], Optional[ViewState]]] = {
            "open": lambda args: self.open(_notes_arg(args), _sort_arg(args)),
            "refresh": lambda args: self.refresh(_notes_arg(args), _sort_arg(args)),
            "close": lambda args: self.close(),
            "focus": lambda args: self.focus(_term_arg(args)),
            "search": lambda args: self.search(_term_arg(args)),
            "sort-by-modified": lambda args: self.sort_by(SortMode.MODIFIED),
            "sort-by-created": lambda args: self.sort_by(SortMode.CREATED),
            "sort-by-size": lambda args: self.sort_by(SortMode.SIZE),
            "query-refresh": lambda args: self.query_refresh(),
            "next-line": lambda args: self.next_line(_int_arg(args, "count", 1)),
            "previous-line": lambda args: self.previous_line(_int_arg(args, "count", 1)),
            "goto-line": lambda args: self.goto_line(_int_arg(args, "line", 1)),
        }

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def state(self) -> Optional[ViewState]:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is not None

    def visible_notes(self) -> List[str]:
        if self._state is None:
            return []
        return list(self._state.visible_ids)

    def breadcrumb(self) -> Optional[str]:
        if self._state is None:
            return None
        return self._state.breadcrumb

    def history(self) -> List[QueryTerm]:
        return list(self._history)

    def is_narrowed(self) -> bool:
        state = self._require_open("is-narrowed")
        return len(state.visible_ids) < len(self.store.list_all())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def on_command(self, name: str, args: Optional[Mapping[str, Any]] = None) -> Optional[ViewState]:
        try:
            handler = self._commands[name]
        except KeyError:
            raise UnknownCommand(name) from None
        logger.info("Command %s %s", name, dict(args or {}))
        return handler(args or {})

    def open(
        self,
        notes: Optional[Sequence[str]] = None,
        sort_mode: Optional[SortMode] = None,
        sorter: Optional[Sorter] = None,
    ) -> ViewState:
        """Open the index over all notes, or over an explicit list of note ids.

        ``sorter`` overrides the sort function for ``sort_mode`` while this
        view lives; without either, the session default applies.
        """
        if self._state is not None:
            return self.refresh(notes, sort_mode, sorter)

        if sort_mode is None and sorter is None:
            sorter = self.default_sorter
        mode = sort_mode or self.default_sort
        universe = self.store.list_all()
        candidates = universe if notes is None else self._resolve(notes, universe)
        self._state = self._build(candidates, mode, sorter, QueryStack(), len(universe), cursor_line=None)
        logger.info("Opened index with %d of %d notes", len(candidates), len(universe))
        return self._state

    def refresh(
        self,
        notes: Optional[Sequence[str]] = None,
        sort_mode: Optional[SortMode] = None,
        sorter: Optional[Sorter] = None,
    ) -> ViewState:
        """Rebuild the listing from the store.

        An explicit list of ids replaces the view and drops any narrowing.
        Without one, a narrowed view (by query or by an earlier explicit
        list) keeps its notes, re-resolved against the store, and an
        unnarrowed view shows the whole corpus again.
        """
        state = self._require_open("refresh")
        if sort_mode is None and sorter is None:
            sorter = state.sorter
        mode = sort_mode or state.sort_mode
        universe = self.store.list_all()
        stack = state.query_stack

        if notes is not None:
            candidates = self._resolve(notes, universe)
            stack = stack.reset()
        elif stack or state.narrowed:
            candidates = self._resolve(state.visible_ids, universe)
        else:
            candidates = universe

        self._state = self._build(candidates, mode, sorter, stack, len(universe), cursor_line=state.cursor_line)
        return self._state

    def close(self) -> None:
        if self._state is not None:
            logger.info("Closed index view")
        self._state = None

    def focus(self, term: str) -> ViewState:
        """Narrow to notes whose title matches ``term``."""
        return self._narrow(QueryKind.FOCUS, term)

    def search(self, term: str) -> ViewState:
        """Narrow to notes whose content matches ``term``."""
        return self._narrow(QueryKind.SEARCH, term)

    def query_refresh(self) -> ViewState:
        """Re-run the whole query stack against the current corpus."""
        state = self._require_open("query-refresh")
        if not state.query_stack:
            raise NotNarrowed()

        universe = self.store.list_all()
        matched = recompose(self.store, state.query_stack.oldest_first(), [n.id for n in universe])
        candidates = self._resolve(matched, universe)
        self._state = self._build(
            candidates,
            state.sort_mode,
            state.sorter,
            state.query_stack,
            len(universe),
            cursor_line=state.cursor_line,
        )
        return self._state

    def sort_by(self, mode: SortMode, sorter: Optional[Sorter] = None) -> ViewState:
        """Re-sort the visible notes and make ``mode`` the default for this session.

        A ``sorter`` replaces the built-in function for ``mode``, for this
        view and for views opened later.
        """
        state = self._require_open(f"sort-by-{mode.value}")
        self.default_sort = mode
        self.default_sorter = sorter
        universe = self.store.list_all()
        candidates = self._resolve(state.visible_ids, universe)
        self._state = self._build(
            candidates, mode, sorter, state.query_stack, len(universe), cursor_line=state.cursor_line
        )
        return self._state

    def next_line(self, count: int = 1) -> ViewState:
        state = self._require_open("next-line")
        return self._move_to(state, state.cursor_line + count)

    def previous_line(self, count: int = 1) -> ViewState:
        state = self._require_open("previous-line")
        return self._move_to(state, state.cursor_line - count)

    def goto_line(self, line: int) -> ViewState:
        state = self._require_open("goto-line")
        return self._move_to(state, line)

    def note_at_cursor(self) -> Optional[Note]:
        state = self._require_open("note-at-cursor")
        if state.current_id is None:
            return None
        return self.store.get(state.current_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _narrow(self, kind: QueryKind, term: str) -> ViewState:
        state = self._require_open(kind.value)
        if not term or not term.strip():
            raise InvalidArgument(f"{kind.label} term must not be empty")

        universe = self.store.list_all()
        by_id = {note.id: note for note in universe}
        if len(state.visible_ids) < len(universe):
            scope = [note_id for note_id in state.visible_ids if note_id in by_id]
            stack = state.query_stack
        else:
            scope = list(by_id)
            stack = state.query_stack.reset()

        try:
            matched, _ = apply_query(self.store, kind, term, scope)
        except NoMatches:
            logger.info("%s %r matched nothing; index left unchanged", kind.label, term)
            raise

        query = QueryTerm(kind=kind, term=term)
        self._history.append(query)
        self._state = self._build(
            [by_id[note_id] for note_id in matched],
            state.sort_mode,
            state.sorter,
            stack.push(query),
            len(universe),
            cursor_line=None,
        )
        logger.info("%s %r narrowed the index to %d notes", kind.label, term, len(matched))
        return self._state

    def _build(
        self,
        candidates: Sequence[Note],
        mode: SortMode,
        sorter: Optional[Sorter],
        stack: QueryStack,
        universe_size: int,
        cursor_line: Optional[int],
    ) -> ViewState:
        ordered = (sorter or self._sorters[mode])(candidates)
        visible_ids = tuple(note.id for note in ordered)
        narrowed = len(visible_ids) < universe_size

        if cursor_line is not None and not narrowed:
            line = _clamp(cursor_line, len(visible_ids))
        else:
            line = 1

        breadcrumb = stack.render_breadcrumb(stack.active_kind) if stack else None
        return ViewState(
            visible_ids=visible_ids,
            sort_mode=mode,
            query_stack=stack,
            cursor_line=line,
            breadcrumb=breadcrumb,
            narrowed=narrowed,
            sorter=sorter,
        )

    def _move_to(self, state: ViewState, line: int) -> ViewState:
        self._state = replace(state, cursor_line=_clamp(line, len(state.visible_ids)))
        return self._state

    def _resolve(self, note_ids: Sequence[str], universe: Sequence[Note]) -> List[Note]:
        by_id = {note.id: note for note in universe}
        resolved = []
        for note_id in note_ids:
            note = by_id.get(note_id)
            if note is None:
                logger.debug("Dropping %s: no longer in the note store", note_id)
                continue
            resolved.append(note)
        return resolved

    def _require_open(self, command: str) -> ViewState:
        if self._state is None:
            raise InvalidContext(command)
        return self._state


def _sort_arg(args: Mapping[str, Any]) -> Optional[SortMode]:
    value = args.get("sort")
    if value is None:
        return None
    try:
        return SortMode(value)
    except ValueError:
        raise InvalidArgument(f"Unknown sort mode: {value}") from None


def _term_arg(args: Mapping[str, Any]) -> str:
    term = args.get("term")
    if not isinstance(term, str):
        raise InvalidArgument("A string 'term' argument is required")
    return term


def _int_arg(args: Mapping[str, Any], key: str, default: int) -> int:
    value = args.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"'{key}' must be an integer")
    return value


def _notes_arg(args: Mapping[str, Any]) -> Optional[List[str]]:
    notes = args.get("notes")
    if notes is None:
        return None
    if not isinstance(notes, (list, tuple)) or not all(isinstance(note_id, str) for note_id in notes):
        raise InvalidArgument("'notes' must be a list of note ids")
    return list(notes)
