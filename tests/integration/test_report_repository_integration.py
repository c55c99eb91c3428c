import pytest

from manuscript_worker.analysis.models import ComplianceFinding
from manuscript_worker.database.repositories.report_repository import ReportRepository
from manuscript_worker.jobs.models import DocumentJob, JobSnapshot, JobStatus


def _finished_job() -> DocumentJob:
    job = DocumentJob(name="paper.pdf", source_ref="paper.pdf", profile_id="profile", user_id=1)
    job.transition(JobStatus.PROCESSING)
    job.log.append("Processing started.")
    return job


@pytest.mark.integration
class TestReportRepository:
    def test_save_then_find(self, integration_cleanup: list[tuple[str, str]]) -> None:
        job = _finished_job()
        job.reports = {
            "compliance": [
                ComplianceFinding(
                    check_category="Word limit",
                    status="fail",
                    summary="Too long.",
                    manuscript_quote="",
                    manuscript_page=1,
                    rule_content="",
                    rule_page=1,
                    recommendation="Shorten.",
                )
            ],
            "scoring": None,
        }
        job.transition(JobStatus.COMPLETED)
        integration_cleanup.append(("manuscript_reports", job.id))

        repo = ReportRepository()
        repo.save(JobSnapshot.of(job))
        record = repo.find_by_id(job.id)

        assert record is not None
        assert record.status == "completed"
        assert record.progress == 100
        assert record.logs[0]["message"] == "Processing started."
        assert record.reports["compliance"][0]["status"] == "fail"
        assert record.updated_at is not None

    def test_save_twice_updates(self, integration_cleanup: list[tuple[str, str]]) -> None:
        job = _finished_job()
        integration_cleanup.append(("manuscript_reports", job.id))
        repo = ReportRepository()
        repo.save(JobSnapshot.of(job))

        job.transition(JobStatus.ERROR)
        repo.save(JobSnapshot.of(job))

        record = repo.find_by_id(job.id)
        assert record is not None
        assert record.status == "error"

    def test_find_missing(self, integration_pool: None) -> None:
        assert ReportRepository().find_by_id("does-not-exist") is None
