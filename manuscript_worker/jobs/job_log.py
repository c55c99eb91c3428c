from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from manuscript_worker.logging.logger import Log


@dataclass(frozen=True)
class LogEntry:
    """One timestamped line of a job's processing log."""

    timestamp: datetime
    message: str

    def render(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.message}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JobLog:
    """Append-only, timestamped log of one job.

    Every append is mirrored to the application logger with the job name as
    prefix, at error level when *error* is set.
    """

    def __init__(
        self,
        job_name: str = "",
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._job_name = job_name
        self._clock = clock
        self._entries: list[LogEntry] = []

    def append(self, message: str, error: bool = False) -> LogEntry:
        entry = LogEntry(timestamp=self._clock(), message=message)
        self._entries.append(entry)
        mirrored = f"[{self._job_name}] {message}" if self._job_name else message
        if error:
            Log.error(mirrored)
        else:
            Log.info(mirrored)
        return entry

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def render(self) -> str:
        return "\n".join(entry.render() for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
