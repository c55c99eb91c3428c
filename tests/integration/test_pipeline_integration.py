import asyncio
from pathlib import Path

import pytest

from manuscript_worker.config.settings import Settings
from manuscript_worker.jobs.models import JobStatus
from manuscript_worker.main import build_application


@pytest.fixture
def example_settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        analysis_provider="example",
        files_root=str(tmp_path),
        chunk_delay_ms=0,
    )


class TestPipelineWithExampleProvider:
    def test_pdf_manuscript_against_text_rules(
        self,
        tmp_path: Path,
        example_settings: Settings,
        multi_page_pdf_bytes: bytes,
    ) -> None:
        (tmp_path / "paper.pdf").write_bytes(multi_page_pdf_bytes)
        (tmp_path / "rules.txt").write_text("Use SI units.", encoding="utf-8")
        app = build_application(example_settings, tmp_path / "out")

        rules_text = app.extractor.extract("rules.txt")
        document = app.rules.add_document("rules.txt", rules_text)
        profile = app.rules.add_profile("Journal", [document.id])
        job = app.store.create("paper.pdf", "paper.pdf", profile.id)
        app.queue.enqueue(job.id)

        processed = asyncio.run(app.worker.drain())

        assert processed == 1
        assert job.status is JobStatus.COMPLETED
        assert job.reports["peer_review"].manuscript_summary == "Example response."
        messages = [entry.message for entry in job.log.entries]
        assert "Split into 1 chunks." in messages
        assert len(list((tmp_path / "out").glob("paper_*_report.csv"))) == 1

    def test_docx_manuscript(
        self,
        tmp_path: Path,
        example_settings: Settings,
        sample_docx_bytes: bytes,
    ) -> None:
        (tmp_path / "paper.docx").write_bytes(sample_docx_bytes)
        app = build_application(example_settings)
        document = app.rules.add_document("inline", "Rule text.")
        profile = app.rules.add_profile("Journal", [document.id])
        job = app.store.create("paper.docx", "paper.docx", profile.id)
        app.queue.enqueue(job.id)

        asyncio.run(app.worker.drain())

        assert job.status is JobStatus.COMPLETED
        assert job.progress == 100
