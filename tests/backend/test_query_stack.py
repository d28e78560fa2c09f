"""
Unit tests for the query stack and its breadcrumb.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from zkindex.models import QueryKind, QueryTerm
from zkindex.query_stack import QueryStack


def focus(term):
    return QueryTerm(kind=QueryKind.FOCUS, term=term)


def search(term):
    return QueryTerm(kind=QueryKind.SEARCH, term=term)


class TestQueryStack:
    """Test suite for QueryStack."""

    def test_push_is_newest_first(self):
        stack = QueryStack().push(focus("a")).push(search("b"))
        assert list(stack) == [search("b"), focus("a")]
        assert stack.active_kind == QueryKind.SEARCH

    def test_push_leaves_original_untouched(self):
        base = QueryStack().push(focus("a"))
        base.push(focus("b"))
        assert list(base) == [focus("a")]

    def test_reset_empties(self):
        stack = QueryStack().push(focus("a")).reset()
        assert len(stack) == 0
        assert not stack
        assert stack.active_kind is None

    def test_breadcrumb_groups_and_active_last(self):
        stack = QueryStack().push(focus("a")).push(search("b")).push(focus("c"))
        assert stack.render_breadcrumb(QueryKind.FOCUS) == '[Search: "b" | Focus: "c + a"]'
        assert stack.render_breadcrumb(QueryKind.SEARCH) == '[Focus: "c + a" | Search: "b"]'

    def test_breadcrumb_defaults_to_newest_kind(self):
        stack = QueryStack().push(search("x")).push(focus("y"))
        assert stack.render_breadcrumb() == '[Search: "x" | Focus: "y"]'

    def test_breadcrumb_single_group(self):
        stack = QueryStack().push(search("foo")).push(search("bar"))
        assert stack.render_breadcrumb(QueryKind.SEARCH) == '[Search: "bar + foo"]'

    def test_oldest_first(self):
        stack = QueryStack().push(focus("a")).push(search("b"))
        assert stack.oldest_first() == [focus("a"), search("b")]
