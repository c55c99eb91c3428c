from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from manuscript_worker.database.connection import get_connection
from manuscript_worker.database.models import ReportRecord
from manuscript_worker.export.report_export import to_json_dict
from manuscript_worker.jobs.models import JobSnapshot
from manuscript_worker.jobs.report_sink import ReportSink


class ReportRepository(ReportSink):
    """Database operations for the manuscript_reports table."""

    def save(self, snapshot: JobSnapshot) -> None:
        """Insert or replace the stored report of a finished job."""
        payload = to_json_dict(snapshot)
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO manuscript_reports
                    (id, name, source_ref, profile_id, user_id, status,
                     progress, logs, reports, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, NOW())
                ON CONFLICT (id) DO UPDATE
                SET status = EXCLUDED.status,
                    progress = EXCLUDED.progress,
                    logs = EXCLUDED.logs,
                    reports = EXCLUDED.reports,
                    updated_at = NOW()
                """,
                (
                    snapshot.id,
                    snapshot.name,
                    snapshot.source_ref,
                    snapshot.profile_id,
                    snapshot.user_id,
                    snapshot.status.value,
                    snapshot.progress,
                    Jsonb(payload["log"]),
                    Jsonb(payload["reports"]),
                ),
            )
            conn.commit()

    def find_by_id(self, report_id: str) -> ReportRecord | None:
        """Find a stored report by job id."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, name, user_id, status, progress, logs, reports,
                           updated_at
                    FROM manuscript_reports
                    WHERE id = %s
                    """,
                    (report_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return ReportRecord(
            id=row["id"],
            name=row["name"],
            user_id=row["user_id"],
            status=row["status"],
            progress=row["progress"],
            logs=row["logs"],
            reports=row["reports"],
            updated_at=row["updated_at"],
        )
