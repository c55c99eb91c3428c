import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from manuscript_worker.jobs.store import JobStore
from manuscript_worker.pipeline.queue import ProcessingQueue
from manuscript_worker.worker.worker import Worker


def _make_worker(job_count: int = 2) -> tuple[Worker, ProcessingQueue, MagicMock, list[str]]:
    """Create a Worker over a real queue with a mocked job runner."""
    store = JobStore()
    queue = ProcessingQueue(store)
    ids = []
    for n in range(job_count):
        job = store.create(f"paper-{n}.pdf", f"paper-{n}.pdf", "profile")
        ids.append(job.id)
    mock_runner = MagicMock()
    mock_runner.run = AsyncMock()
    return Worker(queue, mock_runner), queue, mock_runner, ids


class TestWorkerDispatch:
    def test_drain_dispatches_in_order(self) -> None:
        worker, queue, mock_runner, ids = _make_worker()
        for job_id in ids:
            queue.enqueue(job_id)

        assert asyncio.run(worker.drain()) == 2
        assert [c.args[0] for c in mock_runner.run.await_args_list] == ids
        assert len(queue) == 0

    def test_max_jobs(self) -> None:
        worker, queue, mock_runner, ids = _make_worker()
        for job_id in ids:
            queue.enqueue(job_id)

        assert asyncio.run(worker.run(max_jobs=1)) == 1
        mock_runner.run.assert_awaited_once_with(ids[0])
        assert queue.pending() == (ids[1],)

    def test_cancelled_job_is_skipped(self) -> None:
        worker, queue, mock_runner, ids = _make_worker()
        for job_id in ids:
            queue.enqueue(job_id)
        queue.cancel_if_queued(ids[0])

        asyncio.run(worker.drain())
        mock_runner.run.assert_awaited_once_with(ids[1])

    def test_drain_on_empty_queue(self) -> None:
        worker, _queue, mock_runner, _ids = _make_worker(0)
        assert asyncio.run(worker.drain()) == 0
        mock_runner.run.assert_not_awaited()


class TestWorkerWaiting:
    def test_waits_for_enqueue(self) -> None:
        worker, queue, mock_runner, ids = _make_worker(1)

        async def scenario() -> int:
            task = asyncio.create_task(worker.run(max_jobs=1))
            await asyncio.sleep(0)
            mock_runner.run.assert_not_awaited()
            queue.enqueue(ids[0])
            return await asyncio.wait_for(task, timeout=1)

        assert asyncio.run(scenario()) == 1
        mock_runner.run.assert_awaited_once_with(ids[0])


class TestInFlight:
    def test_in_flight_set_while_running(self) -> None:
        worker, queue, mock_runner, ids = _make_worker(1)
        seen: list[str | None] = []

        async def record(_job_id: str) -> None:
            seen.append(worker.in_flight)

        mock_runner.run.side_effect = record
        queue.enqueue(ids[0])
        asyncio.run(worker.drain())

        assert seen == [ids[0]]
        assert worker.in_flight is None

    def test_in_flight_cleared_when_runner_raises(self) -> None:
        worker, queue, mock_runner, ids = _make_worker(1)
        mock_runner.run.side_effect = RuntimeError("boom")
        queue.enqueue(ids[0])

        with pytest.raises(RuntimeError):
            asyncio.run(worker.drain())
        assert worker.in_flight is None
