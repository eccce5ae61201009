"""
Cursor pagination for Turbonomic list endpoints.

The first response of a paginated endpoint carries two headers:
`x-total-record-count` (records across all pages) and `x-next-cursor`
(offset of the next page, absent or empty when there is none). Every page
holds at most PAGE_SIZE records, so the remaining offsets are known up front
and are requested concurrently.
"""
import asyncio
import math
from typing import Any, Awaitable, Callable, List, Mapping, Optional

from .pool import cancel_pending

# Number of records returned by Turbonomic per request
PAGE_SIZE = 500

TOTAL_RECORDS_HEADER = "x-total-record-count"
NEXT_CURSOR_HEADER = "x-next-cursor"

PageFetcher = Callable[[int], Awaitable[List[Any]]]


def parse_next_cursor(headers: Mapping[str, str]) -> Optional[int]:
    """Return the next cursor, or None when there are no more pages"""
    raw = headers.get(NEXT_CURSOR_HEADER)
    if raw is None or raw.strip() == '':
        return None
    return int(raw)


def parse_total(headers: Mapping[str, str]) -> int:
    raw = headers.get(TOTAL_RECORDS_HEADER)
    if raw is None or raw.strip() == '':
        return 0
    return int(raw)


def page_count(cursor: int, total: int, page_size: int = PAGE_SIZE) -> int:
    """Number of additional requests needed to cover records [cursor, total)"""
    if total <= cursor:
        return 0
    return math.ceil((total - cursor) / page_size)


def page_offsets(cursor: int, total: int, page_size: int = PAGE_SIZE) -> List[int]:
    return [cursor + i * page_size for i in range(page_count(cursor, total, page_size))]


async def paginate(
    fetch_page: PageFetcher,
    first_page: List[Any],
    total: int,
    next_cursor: Optional[int],
    page_size: int = PAGE_SIZE,
) -> List[Any]:
    """Fetch the remaining pages and return the complete result set

    Args:
        fetch_page: Coroutine function returning the records at a cursor
        first_page: Records of the initial response
        total: Declared total record count
        next_cursor: Declared next cursor (None when there are no more pages)
        page_size: Records per page

    Returns:
        First page followed by the other pages in completion order. Callers
        must treat the result as unordered.

    Raises:
        Whatever fetch_page raises; outstanding requests are cancelled and
        no partial result is returned.
    """
    if next_cursor is None:
        return first_page

    results = list(first_page)
    tasks = [asyncio.ensure_future(fetch_page(offset)) for offset in page_offsets(next_cursor, total, page_size)]
    try:
        for next_done in asyncio.as_completed(tasks):
            results.extend(await next_done)
    finally:
        await cancel_pending(tasks)
    return results
