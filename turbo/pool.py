"""Bounded fan-out helpers for concurrent API requests."""
import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, TypeVar

T = TypeVar('T')
R = TypeVar('R')


async def cancel_pending(tasks: List[asyncio.Future]) -> None:
    """Cancel unfinished tasks and wait for them to settle.

    Exceptions of tasks that already failed are marked as retrieved so a
    single failure does not produce extra "never retrieved" warnings.
    """
    pending = [t for t in tasks if not t.done()]
    for t in pending:
        t.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    for t in tasks:
        if not t.cancelled():
            t.exception()


async def gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    """Like asyncio.gather, but the first failure cancels everything else."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    finally:
        await cancel_pending(tasks)


async def bounded_gather(limit: int, items: Iterable[T], fn: Callable[[T], Awaitable[R]]) -> List[R]:
    """Run fn(item) for every item with at most `limit` calls in flight.

    Results come back in input order. The first unhandled failure cancels
    the remaining calls and is re-raised.
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
    semaphore = asyncio.Semaphore(limit)

    async def run(item: T) -> R:
        async with semaphore:
            return await fn(item)

    return await gather_or_cancel(*(run(item) for item in items))
