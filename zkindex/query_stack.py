"""Stack of applied Focus/Search terms, newest first."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from zkindex.models import QueryKind, QueryTerm


@dataclass(frozen=True)
class QueryStack:
    terms: Tuple[QueryTerm, ...] = ()

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[QueryTerm]:
        return iter(self.terms)

    @property
    def active_kind(self) -> Optional[QueryKind]:
        """Kind of the most recently pushed term."""
        return self.terms[0].kind if self.terms else None

    def push(self, term: QueryTerm) -> "QueryStack":
        return QueryStack(terms=(term,) + self.terms)

    def reset(self) -> "QueryStack":
        return QueryStack()

    def oldest_first(self) -> List[QueryTerm]:
        return list(reversed(self.terms))

    def render_breadcrumb(self, active_kind: Optional[QueryKind] = None) -> str:
        """Describe the stack as ``[Search: "b" | Focus: "c + a"]``.

        Terms are grouped per kind in stack order; the group of
        ``active_kind`` goes last. Empty groups are left out.
        """
        if active_kind is None:
            active_kind = self.active_kind

        order = [kind for kind in QueryKind if kind != active_kind]
        if active_kind is not None:
            order.append(active_kind)

        groups = []
        for kind in order:
            words = [query.term for query in self.terms if query.kind == kind]
            if words:
                groups.append(f'{kind.label}: "{" + ".join(words)}"')
        return f"[{' | '.join(groups)}]"
