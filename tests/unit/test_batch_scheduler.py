"""
Unit tests for run_batches.
"""

import asyncio

import pytest

from services.components.batch_scheduler import run_batches


class TestRunBatches:
    """Test suite for the batch scheduler"""

    @pytest.mark.asyncio
    async def test_results_keep_input_order(self):
        # Earlier items finish later inside each batch
        delays = {"a": 0.03, "b": 0.0, "c": 0.02, "d": 0.0, "e": 0.01}

        async def job(item):
            await asyncio.sleep(delays[item])
            return item.upper()

        results = await run_batches(list("abcde"), 2, job)

        assert results == ["A", "B", "C", "D", "E"]

    @pytest.mark.asyncio
    async def test_batches_are_barriers(self):
        events = []

        async def job(item):
            events.append(("start", item))
            await asyncio.sleep(0.01 if item in "ac" else 0)
            events.append(("end", item))
            return item

        await run_batches(list("abcde"), 2, job)

        def index(event):
            return events.index(event)

        # [a, b] fully done before [c, d] starts, which is done before [e]
        assert max(index(("end", "a")), index(("end", "b"))) < min(index(("start", "c")), index(("start", "d")))
        assert max(index(("end", "c")), index(("end", "d"))) < index(("start", "e"))

    @pytest.mark.asyncio
    async def test_jobs_within_batch_run_concurrently(self):
        running = 0
        peak = 0

        async def job(item):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return item

        await run_batches(list(range(7)), 3, job)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_progress_reports(self):
        progress = []

        async def job(item):
            return item

        await run_batches(list(range(5)), 2, job, on_progress=lambda done, total: progress.append((done, total)))

        assert progress == [(2, 5), (4, 5), (5, 5)]

    @pytest.mark.asyncio
    async def test_empty_input(self):
        async def job(item):
            return item

        assert await run_batches([], 10, job) == []

    @pytest.mark.asyncio
    async def test_rejects_non_positive_batch_size(self):
        async def job(item):
            return item

        with pytest.raises(ValueError):
            await run_batches([1], 0, job)
