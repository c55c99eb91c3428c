from datetime import datetime, timezone
from unittest.mock import patch

from manuscript_worker.jobs.job_log import JobLog, LogEntry


def _fixed_clock() -> datetime:
    return datetime(2024, 5, 1, 9, 30, 15, tzinfo=timezone.utc)


class TestJobLog:
    def test_append_returns_timestamped_entry(self) -> None:
        log = JobLog(clock=_fixed_clock)
        entry = log.append("Processing started.")
        assert entry == LogEntry(timestamp=_fixed_clock(), message="Processing started.")
        assert len(log) == 1

    def test_entries_are_immutable_snapshot(self) -> None:
        log = JobLog(clock=_fixed_clock)
        log.append("one")
        entries = log.entries
        log.append("two")
        assert isinstance(entries, tuple)
        assert len(entries) == 1
        assert [e.message for e in log.entries] == ["one", "two"]

    def test_render(self) -> None:
        log = JobLog(clock=_fixed_clock)
        log.append("Processing started.")
        log.append("Split into 3 chunks.")
        assert log.render() == (
            "[09:30:15] Processing started.\n[09:30:15] Split into 3 chunks."
        )

    def test_mirrors_to_application_log(self) -> None:
        log = JobLog(job_name="paper.pdf", clock=_fixed_clock)
        with patch("manuscript_worker.jobs.job_log.Log") as mock_log:
            log.append("hello")
            log.append("FATAL ERROR: boom", error=True)
        mock_log.info.assert_called_once_with("[paper.pdf] hello")
        mock_log.error.assert_called_once_with("[paper.pdf] FATAL ERROR: boom")
