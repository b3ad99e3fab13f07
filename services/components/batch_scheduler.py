import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from core.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_batches(
    items: Sequence[T],
    batch_size: int,
    job: Callable[[T], Awaitable[R]],
    on_progress: Optional[Callable[[int, int], None]] = None,
    label: str = "sourcemaps",
) -> List[R]:
    """
    Runs `job` over `items` in consecutive batches of at most `batch_size`.

    Jobs of one batch run concurrently; the next batch starts only once the
    whole current batch has finished. Jobs are expected to report failures
    in their return value instead of raising.

    Returns:
        Job results in input order
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    total = len(items)
    results: List[R] = []

    for start in range(0, total, batch_size):
        batch = items[start:start + batch_size]
        results.extend(await asyncio.gather(*(job(item) for item in batch)))

        done = min(start + batch_size, total)
        logger.info(f"Processed {done}/{total} {label}")
        if on_progress:
            on_progress(done, total)

    return results
