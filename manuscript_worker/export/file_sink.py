from pathlib import Path

from manuscript_worker.export.report_export import to_csv, to_log_text
from manuscript_worker.jobs.models import JobSnapshot
from manuscript_worker.jobs.report_sink import ReportSink
from manuscript_worker.logging.logger import Log


class FileReportSink(ReportSink):
    """Writes ``<name>_<id>_report.csv`` and ``<name>_<id>.log.txt`` for each finished job.

    The short job id keeps same-named manuscripts from overwriting each other.
    """

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir

    def report_paths(self, snapshot: JobSnapshot) -> tuple[Path, Path]:
        stem = f"{Path(snapshot.name).stem}_{snapshot.id[:8]}"
        return (
            self._output_dir / f"{stem}_report.csv",
            self._output_dir / f"{stem}.log.txt",
        )

    def save(self, snapshot: JobSnapshot) -> None:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        csv_path, log_path = self.report_paths(snapshot)
        csv_path.write_text(to_csv(snapshot), encoding="utf-8")
        log_path.write_text(to_log_text(snapshot), encoding="utf-8")
        Log.info(f"Reports for {snapshot.name} written to {csv_path} and {log_path}")
