"""Bounded-concurrency batch execution."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

TItem = TypeVar("TItem")
TResult = TypeVar("TResult")


@dataclass
class BatchOutcome(Generic[TItem, TResult]):  # noqa: UP046
    """Result of processing one item."""

    item: TItem
    result: TResult | None = None
    error: Exception | None = None

    @property
    def success(self) -> bool:
        """Whether the item was processed without raising."""
        return self.error is None


def chunked(items: Sequence[TItem], size: int) -> list[Sequence[TItem]]:
    """Split items into consecutive chunks of at most ``size``."""
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    return [items[i : i + size] for i in range(0, len(items), size)]


async def run_in_batches(
    items: Sequence[TItem],
    batch_size: int,
    worker: Callable[[TItem], Awaitable[TResult]],
    describe: Callable[[TItem], str] = str,
) -> list[BatchOutcome[TItem, TResult]]:
    """Run ``worker`` over items, one chunk at a time.

    Calls within a chunk run concurrently and chunks run in order, so at most
    ``batch_size`` calls are outstanding. An exception from one item is
    recorded on its outcome and never cancels its siblings or later chunks.

    Args:
        items: Items to process
        batch_size: Maximum number of concurrent calls
        worker: Coroutine function processing one item
        describe: Label of an item for log messages

    Returns:
        One outcome per item, in input order

    """

    async def run_one(item: TItem) -> BatchOutcome[TItem, TResult]:
        try:
            return BatchOutcome(item=item, result=await worker(item))
        except Exception as e:
            logger.exception(f"Failed to process {describe(item)}: {e}")
            return BatchOutcome(item=item, error=e)

    outcomes: list[BatchOutcome[TItem, TResult]] = []
    chunks = chunked(items, batch_size)
    for index, chunk in enumerate(chunks, start=1):
        logger.info(f"Processing batch {index}/{len(chunks)} ({len(chunk)} items)")
        outcomes.extend(await asyncio.gather(*(run_one(item) for item in chunk)))
    return outcomes
