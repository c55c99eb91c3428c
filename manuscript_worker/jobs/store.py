from manuscript_worker.jobs.models import DocumentJob, JobSnapshot, JobStatus
from manuscript_worker.pipeline.exceptions import (
    InvalidTransitionError,
    JobInProgressError,
    JobNotFoundError,
)


class JobStore:
    """In-memory registry of all jobs, keyed by id.

    The store is the single place that lets a job enter PROCESSING, so there
    is never more than one processing job at a time.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, DocumentJob] = {}

    def create(
        self,
        name: str,
        source_ref: str,
        profile_id: str,
        user_id: int = 0,
    ) -> DocumentJob:
        job = DocumentJob(
            name=name,
            source_ref=source_ref,
            profile_id=profile_id,
            user_id=user_id,
        )
        return self.add(job)

    def add(self, job: DocumentJob) -> DocumentJob:
        if job.id in self._jobs:
            raise ValueError(f"Job {job.id} already exists")
        if job.status is not JobStatus.QUEUED:
            raise InvalidTransitionError(f"Job {job.id} must be queued when added")
        self._jobs[job.id] = job
        return job

    def get(self, job_id: str) -> DocumentJob:
        """Raises:
        JobNotFoundError: if no job with this id exists.
        """
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        return job

    def find(self, job_id: str) -> DocumentJob | None:
        return self._jobs.get(job_id)

    def start(self, job_id: str) -> DocumentJob:
        """Move a queued job to PROCESSING.

        Raises:
            JobInProgressError: if another job is already processing.
            InvalidTransitionError: if the job is not queued.
        """
        job = self.get(job_id)
        busy = [other.id for other in self._jobs.values()
                if other.status is JobStatus.PROCESSING and other.id != job_id]
        if busy:
            raise JobInProgressError(
                f"Cannot start job {job_id}: job {busy[0]} is processing"
            )
        job.transition(JobStatus.PROCESSING)
        return job

    def delete(self, job_id: str) -> None:
        """Raises:
        JobInProgressError: if the job is processing.
        """
        job = self.get(job_id)
        if job.status is JobStatus.PROCESSING:
            raise JobInProgressError(f"Job {job_id} is processing and cannot be deleted")
        del self._jobs[job_id]

    def snapshot(self, job_id: str) -> JobSnapshot:
        return JobSnapshot.of(self.get(job_id))

    def snapshots(self) -> list[JobSnapshot]:
        return [JobSnapshot.of(job) for job in self._jobs.values()]

    def processing_count(self) -> int:
        return sum(1 for job in self._jobs.values() if job.status is JobStatus.PROCESSING)

    def __len__(self) -> int:
        return len(self._jobs)
