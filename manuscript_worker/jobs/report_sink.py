from abc import ABC, abstractmethod

from manuscript_worker.jobs.models import JobSnapshot


class ReportSink(ABC):
    """Receives the snapshot of every job that reached a terminal status."""

    @abstractmethod
    def save(self, snapshot: JobSnapshot) -> None:
        """Store the finished job."""
