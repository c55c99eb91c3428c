from manuscript_worker.logging.logger import Log
from manuscript_worker.pipeline.exceptions import JobInProgressError
from manuscript_worker.pipeline.queue import ProcessingQueue
from manuscript_worker.worker.job_runner import JobRunner


class Worker:
    """Queue driver: wait -> dequeue -> run, one job at a time."""

    def __init__(self, queue: ProcessingQueue, job_runner: JobRunner) -> None:
        self._queue = queue
        self._job_runner = job_runner
        self._in_flight: str | None = None

    @property
    def in_flight(self) -> str | None:
        return self._in_flight

    async def run(self, max_jobs: int | None = None, stop_when_idle: bool = False) -> int:
        """Main loop. Runs until cancelled.

        If max_jobs is set, stop after processing that many jobs. If
        stop_when_idle is set, stop as soon as the queue is empty.

        Returns the number of jobs processed.
        """
        Log.info("Worker started, waiting for jobs")
        jobs_done = 0
        while max_jobs is None or jobs_done < max_jobs:
            job_id = self._next_job()
            if job_id is None:
                if stop_when_idle:
                    break
                Log.debug("No jobs queued, waiting")
                await self._queue.wait_for_change()
                continue
            self._in_flight = job_id
            try:
                await self._job_runner.run(job_id)
            finally:
                self._in_flight = None
            jobs_done += 1
        Log.info(f"Worker stopped after {jobs_done} jobs")
        return jobs_done

    async def drain(self) -> int:
        """Process everything queued right now, then return."""
        return await self.run(stop_when_idle=True)

    def _next_job(self) -> str | None:
        if self._in_flight is not None:
            raise JobInProgressError(f"Job {self._in_flight} is still in flight")
        return self._queue.dequeue_next()
