#!/usr/bin/env python3
"""Bounded concurrency helpers.

Fetching independent source groups and pushing independent chunks may run
in parallel, but the directory is rate-limited upstream, so the number of
in-flight calls is always bounded.

Example:
    results = await process_concurrent(groups, fetch_group, max_concurrent=4)
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def process_concurrent(
    items: list[T],
    processor: Callable[[T], Awaitable[Any]],
    max_concurrent: int = 10,
) -> list[Any]:
    """Process items concurrently with bounded concurrency.

    Uses a semaphore to limit the number of concurrent operations. With
    max_concurrent=1 items are processed strictly one after another.

    Args:
        items: List of items to process
        processor: Async function to apply to each item
        max_concurrent: Maximum concurrent operations (minimum 1)

    Returns:
        List of results in the same order as input items
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrent))

    async def bounded_processor(item: T) -> Any:
        async with semaphore:
            return await processor(item)

    tasks = [bounded_processor(item) for item in items]
    return await asyncio.gather(*tasks)
