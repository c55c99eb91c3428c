import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from manuscript_worker.analysis.models import AnalysisResponse, StageResult
from manuscript_worker.analysis.service import AnalysisService
from manuscript_worker.jobs.models import DocumentJob
from manuscript_worker.jobs.usage import UsageTally
from manuscript_worker.pipeline.stages import StageDefinition, StageInputs

DEFAULT_CHUNK_DELAY_SECONDS = 1.5


@dataclass(frozen=True)
class StageOutcome:
    """Result of one stage. ``value`` is None when the stage failed."""

    definition: StageDefinition
    value: StageResult | None = None
    error: str | None = None
    response: AnalysisResponse | None = None

    @property
    def succeeded(self) -> bool:
        return self.value is not None


class StageRunner:
    """Runs a single analysis stage and contains its failure.

    Retries happen inside the analysis service. Whatever still fails is
    written to the job log once and reported as an empty outcome.
    """

    def __init__(
        self,
        service: AnalysisService,
        chunk_delay_seconds: float = DEFAULT_CHUNK_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._service = service
        self._chunk_delay = chunk_delay_seconds
        self._sleep = sleep

    async def run_stage(
        self,
        definition: StageDefinition,
        inputs: StageInputs,
        job: DocumentJob,
        usage: UsageTally | None = None,
    ) -> StageOutcome:
        def on_retry(attempt: int, delay: float, exc: BaseException) -> None:
            job.log.append(
                f"Retriable error in {definition.label}. Retrying in {delay:g}s... "
                f"(Attempt {attempt}/{self._service.max_attempts})"
            )

        try:
            prompt = definition.render_prompt(inputs)
            response = await self._service.call(
                prompt,
                definition.template.schema_name,
                definition.template.schema,
                on_retry=on_retry,
            )
            if usage is not None:
                usage.add(response)
            value = definition.build_result(response.payload)
        except Exception as exc:
            job.log.append(f"ERROR processing {definition.label}: {exc}", error=True)
            return StageOutcome(definition=definition, error=str(exc))

        return StageOutcome(definition=definition, value=value, response=response)

    async def wait_between_chunks(self) -> None:
        """Courtesy pause between consecutive chunk calls."""
        if self._chunk_delay > 0:
            await self._sleep(self._chunk_delay)
