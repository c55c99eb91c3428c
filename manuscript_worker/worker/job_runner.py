from manuscript_worker.jobs.models import JobStatus
from manuscript_worker.jobs.store import JobStore
from manuscript_worker.logging.logger import Log
from manuscript_worker.pipeline.orchestrator import JobOrchestrator


class JobRunner:
    """Run one job and make sure it ends in a terminal status."""

    def __init__(self, orchestrator: JobOrchestrator, store: JobStore) -> None:
        self._orchestrator = orchestrator
        self._store = store

    async def run(self, job_id: str) -> None:
        """Execute a single job with error handling."""
        Log.info(f"Running job {job_id}")
        try:
            job = await self._orchestrator.run(job_id)
            Log.info(f"Job {job_id} finished with status {job.status.value}")
        except Exception as exc:
            self._handle_failure(job_id, exc)

    def _handle_failure(self, job_id: str, exc: Exception) -> None:
        """Force a job that broke mid-run into ERROR so the queue can move on."""
        Log.exception(f"Job {job_id} failed: {exc}")
        job = self._store.find(job_id)
        if job is not None and job.status is JobStatus.PROCESSING:
            job.log.append(f"FATAL ERROR: {exc}", error=True)
            job.transition(JobStatus.ERROR)
