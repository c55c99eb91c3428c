import asyncio
from collections import deque

from manuscript_worker.jobs.models import JobStatus
from manuscript_worker.jobs.store import JobStore
from manuscript_worker.logging.logger import Log
from manuscript_worker.pipeline.exceptions import InvalidTransitionError


class ProcessingQueue:
    """FIFO of queued job ids shared by all folders.

    ``enqueue`` and ``cancel_if_queued`` are the only ways to change it from
    outside. ``dequeue_next`` belongs to the Worker. Every change sets an
    event the Worker waits on.
    """

    def __init__(self, store: JobStore) -> None:
        self._store = store
        self._pending: deque[str] = deque()
        self._changed = asyncio.Event()

    def enqueue(self, job_id: str) -> None:
        """Raises:
        JobNotFoundError: if the job is not in the store.
        InvalidTransitionError: if the job is not queued or already enqueued.
        """
        job = self._store.get(job_id)
        if job.status is not JobStatus.QUEUED:
            raise InvalidTransitionError(
                f"Job {job_id} is {job.status.value} and cannot be enqueued"
            )
        if job_id in self._pending:
            raise InvalidTransitionError(f"Job {job_id} is already enqueued")
        self._pending.append(job_id)
        Log.debug(f"Job {job_id} enqueued ({len(self._pending)} pending)")
        self._changed.set()

    def cancel_if_queued(self, job_id: str) -> bool:
        """Drop a job that has not started yet, from the queue and the store.

        Returns False when the job is not waiting in the queue.
        """
        if job_id not in self._pending:
            return False
        self._pending.remove(job_id)
        self._store.delete(job_id)
        Log.info(f"Job {job_id} cancelled before processing")
        self._changed.set()
        return True

    def dequeue_next(self) -> str | None:
        if not self._pending:
            return None
        return self._pending.popleft()

    async def wait_for_change(self) -> None:
        await self._changed.wait()
        self._changed.clear()

    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._pending
