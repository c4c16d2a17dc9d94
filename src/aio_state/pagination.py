from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

from .constants import LIST_CURSOR_START
from .models import ListPage


logger = logging.getLogger(__name__)

Cursor = Union[int, str, None]
# Fetches one page for the given query params; None means the container is absent (404)
PageFetcher = Callable[[Dict[str, Any]], Optional[ListPage]]


def is_end_cursor(cursor: Cursor) -> bool:
    return cursor is None or str(cursor) == str(LIST_CURSOR_START)


class ListPaginator(Iterator[ListPage]):
    """
    Lazy, cursor-driven iteration over list pages.

    - Starts at cursor 0 and requests one page per `next()`.
    - A 404 yields a single empty page and ends the iteration.
    - Ends once the server hands back the start cursor again.
    - Not restartable; every `client.list()` call builds a fresh paginator.

    Matching happens server-side and `countHint` is only a hint, so the
    number of pages for a given key count is not fixed.
    """

    def __init__(self, fetch_page: PageFetcher, params: Optional[Mapping[str, Any]] = None) -> None:
        self._fetch_page = fetch_page
        self._params = {k: v for k, v in (params or {}).items() if v is not None}
        self.cursor: Cursor = LIST_CURSOR_START
        self.done = False
        self.pages = 0

    def __iter__(self) -> "ListPaginator":
        return self

    def __next__(self) -> ListPage:
        if self.done:
            raise StopIteration

        query = {**self._params, "cursor": self.cursor}
        page = self._fetch_page(query)
        self.pages += 1
        if page is None:
            self.done = True
            return ListPage(keys=[], cursor=LIST_CURSOR_START)

        self.cursor = page.cursor
        if is_end_cursor(self.cursor):
            self.done = True
        logger.debug("list page %d: %d keys, next cursor %s", self.pages, len(page.keys), self.cursor)
        return page

    def all_keys(self) -> list[str]:
        """Drain the remaining pages and return their keys, de-duplicated in order."""
        seen: set[str] = set()
        out: list[str] = []
        for page in self:
            for k in page.keys:
                if k not in seen:
                    seen.add(k)
                    out.append(k)
        return out


__all__ = ["ListPaginator", "PageFetcher", "is_end_cursor"]
