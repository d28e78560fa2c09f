"""Resolve Focus/Search predicates against a scope of note ids."""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, List, Sequence, Tuple

from zkindex.errors import NoMatches
from zkindex.models import QueryKind, QueryTerm
from zkindex.note_store import NoteStore

logger = logging.getLogger(__name__)


def apply_query(
    store: NoteStore,
    kind: QueryKind,
    term: str,
    scope: Sequence[str],
) -> Tuple[List[str], FrozenSet[str]]:
    """Return the ids of ``scope`` matching ``term``, in scope order, and the new scope.

    Focus matches note titles, Search matches full note content. Raises
    NoMatches when nothing in scope matches.
    """
    if kind == QueryKind.FOCUS:
        hits = store.title_matches(term)
    else:
        hits = store.content_matches(term)

    matched = [note_id for note_id in scope if note_id in hits]
    logger.debug("%s %r matched %d of %d notes", kind.label, term, len(matched), len(scope))
    if not matched:
        raise NoMatches(term)
    return matched, frozenset(matched)


def recompose(store: NoteStore, queries: Iterable[QueryTerm], universe: Sequence[str]) -> List[str]:
    """Apply ``queries`` (oldest first) one after another, starting from ``universe``."""
    scope = list(universe)
    for query in queries:
        scope, _ = apply_query(store, query.kind, query.term, scope)
    return scope
