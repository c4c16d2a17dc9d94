from __future__ import annotations

from typing import Any, Dict, List, Optional

from aio_state.models import ListPage
from aio_state.pagination import ListPaginator, is_end_cursor


class FakePages:
    """Serves a fixed sequence of pages and records the queries it received."""

    def __init__(self, pages: List[Optional[ListPage]]) -> None:
        self._pages = list(pages)
        self.queries: List[Dict[str, Any]] = []

    def __call__(self, query: Dict[str, Any]) -> Optional[ListPage]:
        self.queries.append(query)
        return self._pages.pop(0)


def test_end_cursor_sentinels():
    assert is_end_cursor(0)
    assert is_end_cursor("0")
    assert is_end_cursor(None)
    assert not is_end_cursor(17)
    assert not is_end_cursor("abc")


def test_forwards_server_cursor_unchanged():
    fetch = FakePages([
        ListPage(keys=["a", "b"], cursor="c1"),
        ListPage(keys=["c"], cursor=42),
        ListPage(keys=[], cursor="0"),
    ])
    pages = list(ListPaginator(fetch, {"match": "*", "countHint": None}))

    assert [p.keys for p in pages] == [["a", "b"], ["c"], []]
    assert fetch.queries == [
        {"match": "*", "cursor": 0},
        {"match": "*", "cursor": "c1"},
        {"match": "*", "cursor": 42},
    ]


def test_not_found_yields_single_empty_page():
    fetch = FakePages([None])
    it = ListPaginator(fetch)
    page = next(it)
    assert page.keys == []
    assert it.done
    assert list(it) == []
    assert len(fetch.queries) == 1


def test_missing_cursor_terminates():
    fetch = FakePages([ListPage(keys=["x"], cursor=None)])
    assert ListPaginator(fetch).all_keys() == ["x"]


def test_not_restartable():
    fetch = FakePages([ListPage(keys=["x"], cursor=0)])
    it = ListPaginator(fetch)
    assert [p.keys for p in it] == [["x"]]
    assert [p.keys for p in it] == []
    assert it.pages == 1


def test_all_keys_deduplicates_in_order():
    fetch = FakePages([
        ListPage(keys=["a", "b"], cursor=1),
        ListPage(keys=["b", "c"], cursor=2),
        ListPage(keys=["a"], cursor=0),
    ])
    assert ListPaginator(fetch).all_keys() == ["a", "b", "c"]


def test_is_its_own_iterator():
    it = ListPaginator(FakePages([ListPage(keys=[], cursor=0)]))
    assert iter(it) is it
