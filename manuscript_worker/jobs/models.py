import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from manuscript_worker.jobs.job_log import JobLog, LogEntry
from manuscript_worker.pipeline.exceptions import InvalidTransitionError


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.ERROR)


_ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.QUEUED: frozenset({JobStatus.PROCESSING}),
    JobStatus.PROCESSING: frozenset({JobStatus.COMPLETED, JobStatus.ERROR}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.ERROR: frozenset(),
}


@dataclass
class DocumentJob:
    """One manuscript moving through the analysis pipeline.

    Status only moves QUEUED -> PROCESSING -> COMPLETED | ERROR and progress
    never decreases. Once terminal, only the log may still grow.
    """

    name: str
    source_ref: str
    profile_id: str
    user_id: int = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: JobStatus = JobStatus.QUEUED
    progress: int = 0
    log: JobLog = field(init=False, repr=False)
    reports: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.log = JobLog(job_name=self.name)

    def transition(self, target: JobStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Job {self.id}: cannot move from {self.status.value} to {target.value}"
            )
        self.status = target
        if target.is_terminal:
            self.progress = 100

    def advance_progress(self, value: int) -> None:
        """Raise progress to *value*; lower values are ignored."""
        if self.status is not JobStatus.PROCESSING:
            raise InvalidTransitionError(
                f"Job {self.id}: progress only changes while processing"
            )
        self.progress = max(self.progress, min(100, value))


@dataclass(frozen=True)
class JobSnapshot:
    """Read-only view of a job at one point in time."""

    id: str
    name: str
    source_ref: str
    profile_id: str
    user_id: int
    status: JobStatus
    progress: int
    log: tuple[LogEntry, ...]
    reports: dict[str, Any]
    created_at: datetime

    @classmethod
    def of(cls, job: DocumentJob) -> "JobSnapshot":
        return cls(
            id=job.id,
            name=job.name,
            source_ref=job.source_ref,
            profile_id=job.profile_id,
            user_id=job.user_id,
            status=job.status,
            progress=job.progress,
            log=job.log.entries,
            reports=dict(job.reports),
            created_at=job.created_at,
        )

    def render_log(self) -> str:
        return "\n".join(entry.render() for entry in self.log)
