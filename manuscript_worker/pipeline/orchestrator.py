"""Drives one job from QUEUED to a terminal status."""

import asyncio
from collections.abc import Sequence
from typing import Any

from manuscript_worker.analysis.models import (
    ComplianceChunkResult,
    ComplianceFinding,
    JournalRecommendation,
)
from manuscript_worker.chunking.chunker import PAGE_MARKER_RE, TextChunk, chunk_pages
from manuscript_worker.extraction.document_extractor import DocumentTextExtractor
from manuscript_worker.jobs.models import DocumentJob, JobSnapshot, JobStatus
from manuscript_worker.jobs.report_sink import ReportSink
from manuscript_worker.jobs.store import JobStore
from manuscript_worker.jobs.usage import UsageEntry, UsageRecorder, UsageTally
from manuscript_worker.logging.logger import Log
from manuscript_worker.pipeline.exceptions import EmptyDocumentError
from manuscript_worker.pipeline.stage_runner import StageRunner
from manuscript_worker.pipeline.stages import (
    COMPLIANCE,
    WHOLE_DOCUMENT_STAGES,
    StageInputs,
    StageTemplate,
    describe_result,
    plan_stages,
)
from manuscript_worker.retry.backoff import BackoffExecutor
from manuscript_worker.rules.resolver import RuleResolver

REPORT_KEYS = ("compliance", "recommendations", *WHOLE_DOCUMENT_STAGES)


def progress_percent(attempted: int, total: int) -> int:
    """``100 * attempted / total`` rounded half up."""
    if total <= 0:
        return 100
    return (200 * attempted + total) // (2 * total)


class JobOrchestrator:
    """Runs the full analysis of one job.

    Extraction, chunking and rule resolution are fatal when they fail: the job
    ends in ERROR without any stage being attempted. After that, a failing
    stage only leaves its report empty and the job still completes.
    """

    def __init__(
        self,
        *,
        store: JobStore,
        extractor: DocumentTextExtractor,
        rules: RuleResolver,
        runner: StageRunner,
        templates: dict[str, StageTemplate],
        executor: BackoffExecutor,
        usage_recorder: UsageRecorder,
        report_sink: ReportSink | None = None,
        pages_per_chunk: int = 25,
        whole_document_stages: Sequence[str] = WHOLE_DOCUMENT_STAGES,
        recommendations_enabled: bool = True,
        tool_name: str = "Manuscript Compliance Checker",
        model_name: str = "",
    ) -> None:
        self._store = store
        self._extractor = extractor
        self._rules = rules
        self._runner = runner
        self._templates = templates
        self._executor = executor
        self._usage_recorder = usage_recorder
        self._report_sink = report_sink
        self._pages_per_chunk = pages_per_chunk
        self._whole_document_stages = tuple(whole_document_stages)
        self._recommendations_enabled = recommendations_enabled
        self._tool_name = tool_name
        self._model_name = model_name

    async def run(self, job_id: str) -> DocumentJob:
        """Process a queued job and return it in its terminal status.

        Raises:
            JobNotFoundError: if the job id is unknown.
            JobInProgressError: if another job is processing.
            InvalidTransitionError: if the job is not queued.
        """
        job = self._store.start(job_id)
        job.log.append("Processing started.")

        try:
            inputs, chunks = await self._prepare(job)
        except Exception as exc:
            job.log.append(f"FATAL ERROR: {exc}", error=True)
            job.transition(JobStatus.ERROR)
            await self._publish(job)
            return job

        plan = plan_stages(
            self._templates,
            chunks,
            self._whole_document_stages,
            self._recommendations_enabled,
        )
        total = len(plan)
        job.log.append(f"Planned {total} analysis stages.")

        usage = UsageTally()
        findings: list[ComplianceFinding] = []
        recommendations: list[JournalRecommendation] = []
        reports: dict[str, Any] = {key: None for key in REPORT_KEYS}

        for attempted, definition in enumerate(plan, start=1):
            if definition.is_chunk_stage and attempted > 1:
                await self._runner.wait_between_chunks()
            job.log.append(f"Processing {definition.label}...")
            outcome = await self._runner.run_stage(definition, inputs, job, usage)

            if outcome.value is not None:
                job.log.append(describe_result(definition, outcome.value))
                if isinstance(outcome.value, ComplianceChunkResult):
                    findings.extend(outcome.value.findings)
                    if definition.include_recommendations:
                        recommendations = list(outcome.value.recommendations)
                else:
                    reports[definition.name] = outcome.value

            job.advance_progress(progress_percent(attempted, total))

        reports[COMPLIANCE] = findings
        reports["recommendations"] = recommendations
        job.reports = reports

        await self._record_usage(job, usage)
        job.log.append("Processing complete.")
        job.transition(JobStatus.COMPLETED)
        await self._publish(job)
        return job

    async def _prepare(self, job: DocumentJob) -> tuple[StageInputs, list[TextChunk]]:
        job.log.append("Extracting text from manuscript...")
        text = await self._executor.execute(
            lambda: asyncio.to_thread(self._extractor.extract, job.source_ref)
        )
        if not PAGE_MARKER_RE.sub("", text).strip():
            raise EmptyDocumentError("No text could be extracted from the manuscript.")

        chunks = chunk_pages(text, self._pages_per_chunk)
        job.log.append(f"Split into {len(chunks)} chunks.")

        rules_text = self._rules.resolve(job.profile_id)
        return StageInputs(manuscript_text=text, rules_text=rules_text), chunks

    async def _record_usage(self, job: DocumentJob, usage: UsageTally) -> None:
        entry = UsageEntry(
            user_id=job.user_id,
            tool_name=self._tool_name,
            model_name=self._model_name,
            output_id=job.id,
            output_name=job.name,
            calls=usage.calls,
            prompt_tokens=usage.prompt_tokens,
            response_tokens=usage.response_tokens,
        )
        try:
            await asyncio.to_thread(self._usage_recorder.record, entry)
        except Exception as exc:
            Log.warning(f"Could not record usage for job {job.id}: {exc}")

    async def _publish(self, job: DocumentJob) -> None:
        if self._report_sink is None:
            return
        try:
            await asyncio.to_thread(self._report_sink.save, JobSnapshot.of(job))
        except Exception as exc:
            Log.warning(f"Could not save report for job {job.id}: {exc}")
