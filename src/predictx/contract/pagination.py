"""Cursor pagination over `start_after` / `limit` queries."""

from __future__ import annotations

from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


async def paginate(
    fetch_page: Callable[[Any, int], Awaitable[list[T]]],
    *,
    limit: int,
    cursor: Callable[[T], Any],
    start_after: Any = None,
    max_pages: int | None = None,
) -> AsyncIterator[T]:
    """
    Yield items from fetch_page(start_after, limit) until a page comes back shorter than limit.
    The next cursor is cursor(last item). Stops as well if the cursor does not advance,
    so a contract that ignores start_after cannot loop us forever.
    """
    if limit < 1:
        raise ValueError("limit must be >= 1")
    pages = 0
    while True:
        page = await fetch_page(start_after, limit)
        pages += 1
        for item in page:
            yield item
        if len(page) < limit:
            return
        next_cursor = cursor(page[-1])
        if next_cursor == start_after:
            log.warning("pagination_cursor_stuck", cursor=next_cursor)
            return
        if max_pages is not None and pages >= max_pages:
            return
        start_after = next_cursor


async def collect(iterator: AsyncIterator[T], max_items: int | None = None) -> list[T]:
    """Drain an async iterator into a list (optionally capped)."""
    out: list[T] = []
    async for item in iterator:
        out.append(item)
        if max_items is not None and len(out) >= max_items:
            break
    return out
