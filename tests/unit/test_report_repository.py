from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from manuscript_worker.database.models import ReportRecord
from manuscript_worker.database.repositories.report_repository import ReportRepository
from manuscript_worker.jobs.models import DocumentJob, JobSnapshot, JobStatus

_PATCH_TARGET = "manuscript_worker.database.repositories.report_repository.get_connection"


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


def _make_snapshot() -> JobSnapshot:
    job = DocumentJob(name="paper.pdf", source_ref="in/paper.pdf", profile_id="prof", user_id=3)
    job.transition(JobStatus.PROCESSING)
    job.log.append("Processing started.")
    job.reports = {"compliance": [], "scoring": None}
    job.transition(JobStatus.COMPLETED)
    return JobSnapshot.of(job)


class TestSave:
    @patch(_PATCH_TARGET)
    def test_upserts_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        snapshot = _make_snapshot()

        ReportRepository().save(snapshot)

        sql, params = mock_conn.execute.call_args.args
        assert "INSERT INTO manuscript_reports" in sql
        assert "ON CONFLICT (id) DO UPDATE" in sql
        assert params[:7] == (snapshot.id, "paper.pdf", "in/paper.pdf", "prof", 3, "completed", 100)
        assert params[7].obj[0]["message"] == "Processing started."
        assert params[8].obj == {"compliance": [], "scoring": None}
        mock_conn.commit.assert_called_once()


class TestFindById:
    @patch(_PATCH_TARGET)
    def test_returns_record_when_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        updated_at = datetime(2024, 5, 1, tzinfo=timezone.utc)
        mock_cursor.fetchone.return_value = {
            "id": "abc",
            "name": "paper.pdf",
            "user_id": 3,
            "status": "completed",
            "progress": 100,
            "logs": [],
            "reports": {"compliance": []},
            "updated_at": updated_at,
        }

        result = ReportRepository().find_by_id("abc")

        assert isinstance(result, ReportRecord)
        assert result.status == "completed"
        assert result.reports == {"compliance": []}
        assert result.updated_at == updated_at

    @patch(_PATCH_TARGET)
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert ReportRepository().find_by_id("missing") is None
