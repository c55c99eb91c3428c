import argparse
import asyncio
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from manuscript_worker.analysis.factory import AnalysisServiceFactory
from manuscript_worker.config.settings import Settings
from manuscript_worker.database.connection import close_pool, init_pool
from manuscript_worker.database.repositories.report_repository import ReportRepository
from manuscript_worker.database.repositories.usage_repository import UsageRepository
from manuscript_worker.export.file_sink import FileReportSink
from manuscript_worker.extraction.document_extractor import DocumentTextExtractor
from manuscript_worker.extraction.exceptions import TextExtractionError
from manuscript_worker.extraction.factory import ExtractorFactory
from manuscript_worker.jobs.models import JobSnapshot, JobStatus
from manuscript_worker.jobs.report_sink import ReportSink
from manuscript_worker.jobs.store import JobStore
from manuscript_worker.jobs.usage import InMemoryUsageLedger, UsageRecorder
from manuscript_worker.logging.logger import Log
from manuscript_worker.pipeline.orchestrator import JobOrchestrator
from manuscript_worker.pipeline.queue import ProcessingQueue
from manuscript_worker.pipeline.stage_runner import StageRunner
from manuscript_worker.pipeline.stages import load_stage_templates
from manuscript_worker.rules.resolver import RuleResolver
from manuscript_worker.worker.job_runner import JobRunner
from manuscript_worker.worker.worker import Worker


@dataclass
class Application:
    """Everything a run needs, wired together."""

    store: JobStore
    queue: ProcessingQueue
    rules: RuleResolver
    extractor: DocumentTextExtractor
    worker: Worker


class _CompositeSink(ReportSink):
    def __init__(self, sinks: Sequence[ReportSink]) -> None:
        self._sinks = tuple(sinks)

    def save(self, snapshot: JobSnapshot) -> None:
        """Offer the snapshot to every sink; one failing sink does not skip the rest."""
        for sink in self._sinks:
            try:
                sink.save(snapshot)
            except Exception as exc:
                Log.warning(
                    f"{type(sink).__name__} could not save report for job {snapshot.id}: {exc}"
                )


def build_application(settings: Settings, output_dir: Path | None = None) -> Application:
    """Build every collaborator from settings.

    With ``persist_results`` the usage log and the reports also go to the
    database; the pool must be initialised by the caller.
    """
    store = JobStore()
    queue = ProcessingQueue(store)
    rules = RuleResolver()
    extractor = ExtractorFactory.create(settings)
    service = AnalysisServiceFactory.create(settings)

    sinks: list[ReportSink] = []
    if output_dir is not None:
        sinks.append(FileReportSink(output_dir))
    usage_recorder: UsageRecorder = InMemoryUsageLedger()
    if settings.persist_results:
        sinks.append(ReportRepository())
        usage_recorder = UsageRepository()

    orchestrator = JobOrchestrator(
        store=store,
        extractor=extractor,
        rules=rules,
        runner=StageRunner(service, chunk_delay_seconds=settings.chunk_delay_ms / 1000),
        templates=load_stage_templates(),
        executor=AnalysisServiceFactory.create_executor(settings),
        usage_recorder=usage_recorder,
        report_sink=_CompositeSink(sinks) if sinks else None,
        pages_per_chunk=settings.chunk_pages,
        whole_document_stages=settings.whole_document_stages,
        recommendations_enabled=settings.recommendations_enabled,
        tool_name=settings.tool_name,
        model_name=service.model,
    )
    worker = Worker(queue, JobRunner(orchestrator, store))
    return Application(store=store, queue=queue, rules=rules, extractor=extractor, worker=worker)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="manuscript-worker",
        description="Check manuscripts against rule documents with AI-assisted editorial analysis.",
    )
    parser.add_argument("manuscripts", nargs="+", type=Path,
                        help="Manuscript files (.pdf, .docx, .txt, .md)")
    parser.add_argument("--rules", action="append", type=Path, required=True,
                        help="Rule document; repeat for several")
    parser.add_argument("--profile-name", default="Default profile",
                        help="Name of the rule profile built from --rules")
    parser.add_argument("--output-dir", type=Path, default=Path("reports"),
                        help="Directory for the CSV and log reports")
    return parser.parse_args(argv)


async def run(app: Application, args: argparse.Namespace, settings: Settings) -> int:
    """Register rules and manuscripts, drain the queue, return the exit code."""
    document_ids = []
    for rule_path in args.rules:
        try:
            text = await asyncio.to_thread(app.extractor.extract, str(rule_path))
        except (TextExtractionError, OSError) as exc:
            Log.error(f"Cannot read rule document {rule_path}: {exc}")
            return 2
        document_ids.append(app.rules.add_document(rule_path.name, text).id)
    profile = app.rules.add_profile(args.profile_name, document_ids)
    Log.info(f"Rule profile '{profile.name}' built from {len(document_ids)} documents")

    job_ids = []
    for manuscript in args.manuscripts:
        job = app.store.create(
            name=manuscript.name,
            source_ref=str(manuscript),
            profile_id=profile.id,
            user_id=settings.user_id,
        )
        app.queue.enqueue(job.id)
        job_ids.append(job.id)

    await app.worker.drain()

    failed = [job_id for job_id in job_ids if app.store.get(job_id).status is JobStatus.ERROR]
    Log.info(f"{len(job_ids) - len(failed)} of {len(job_ids)} manuscripts completed")
    return 1 if failed else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse args -> build dependencies -> drain the queue."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    if settings.persist_results:
        init_pool(settings)

    try:
        app = build_application(settings, args.output_dir)
        return asyncio.run(run(app, args, settings))
    except KeyboardInterrupt:
        Log.info("Worker shutting down gracefully")
        return 130
    finally:
        close_pool()


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
