"""Analysis stage definitions and the per-job stage plan.

A job runs one compliance stage per chunk followed by the whole-document
stages, always in the order of ``WHOLE_DOCUMENT_STAGES``.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from manuscript_worker.analysis.models import (
    ComplianceChunkResult,
    MetadataReport,
    PeerReviewSummary,
    ScoreReport,
    StageResult,
)
from manuscript_worker.analysis.prompt_loader import load_json_schema, load_prompt_template
from manuscript_worker.analysis.validator import (
    build_compliance_result,
    build_metadata_report,
    build_peer_review,
    build_readability_issues,
    build_score_report,
    build_structural_issues,
)
from manuscript_worker.chunking.chunker import TextChunk

COMPLIANCE = "compliance"
STRUCTURAL = "structural"
READABILITY = "readability"
SCORING = "scoring"
METADATA = "metadata"
PEER_REVIEW = "peer_review"

WHOLE_DOCUMENT_STAGES = (STRUCTURAL, READABILITY, SCORING, METADATA, PEER_REVIEW)
ALL_STAGES = (COMPLIANCE, *WHOLE_DOCUMENT_STAGES)

STAGE_TITLES = {
    COMPLIANCE: "compliance",
    STRUCTURAL: "structural analysis",
    READABILITY: "readability analysis",
    SCORING: "manuscript scoring",
    METADATA: "metadata extraction",
    PEER_REVIEW: "peer review simulation",
}

RECOMMEND_JOURNALS = (
    "Based on the abstract, keywords, structure and references in this chunk, "
    "suggest 3 to 5 suitable journals for submission."
)
SKIP_JOURNALS = (
    "Do not recommend journals for this chunk. "
    "Return an empty list for journal_recommendations."
)

_WHOLE_DOCUMENT_BUILDERS = {
    STRUCTURAL: build_structural_issues,
    READABILITY: build_readability_issues,
    SCORING: build_score_report,
    METADATA: build_metadata_report,
    PEER_REVIEW: build_peer_review,
}


@dataclass(frozen=True)
class StageTemplate:
    """Prompt template and response schema of one stage kind."""

    name: str
    template: str
    schema: dict[str, object]

    @property
    def schema_name(self) -> str:
        return f"{self.name}_result"

    @property
    def schema_text(self) -> str:
        return json.dumps(self.schema, indent=2)


def load_stage_templates(prompt_dir: Path | None = None) -> dict[str, StageTemplate]:
    """Load the prompt and schema of every stage kind.

    Raises:
        AnalysisError: if a prompt or schema file cannot be read.
    """
    return {
        name: StageTemplate(
            name=name,
            template=load_prompt_template(name, prompt_dir),
            schema=load_json_schema(name, prompt_dir),
        )
        for name in ALL_STAGES
    }


@dataclass(frozen=True)
class StageInputs:
    """Texts shared by every stage of one job."""

    manuscript_text: str
    rules_text: str


@dataclass(frozen=True)
class StageDefinition:
    """One planned call to the analysis service."""

    template: StageTemplate
    chunk: TextChunk | None = None
    chunk_count: int = 0
    include_recommendations: bool = False

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def is_chunk_stage(self) -> bool:
        return self.chunk is not None

    @property
    def label(self) -> str:
        if self.chunk is not None:
            return f"{STAGE_TITLES[self.name]} chunk {self.chunk.index + 1}/{self.chunk_count}"
        return STAGE_TITLES[self.name]

    def render_prompt(self, inputs: StageInputs) -> str:
        if self.chunk is not None:
            manuscript_text = self.chunk.text
            page_range = self.chunk.page_range_label
        else:
            manuscript_text = inputs.manuscript_text
            page_range = "all pages"
        return self.template.template.format(
            manuscript_text=manuscript_text,
            rules_text=inputs.rules_text,
            page_range=page_range,
            recommendation_instruction=(
                RECOMMEND_JOURNALS if self.include_recommendations else SKIP_JOURNALS
            ),
            json_schema=self.template.schema_text,
        )

    def build_result(self, payload: dict[str, Any]) -> StageResult:
        """Raises:
        AnalysisValidationError: if the payload has the wrong shape.
        """
        if self.name == COMPLIANCE:
            return build_compliance_result(payload, self.include_recommendations)
        return _WHOLE_DOCUMENT_BUILDERS[self.name](payload)


def plan_stages(
    templates: dict[str, StageTemplate],
    chunks: list[TextChunk],
    whole_document_stages: Iterable[str] = WHOLE_DOCUMENT_STAGES,
    recommendations_enabled: bool = True,
) -> list[StageDefinition]:
    """Build the ordered stage list for one job.

    Whole-document stages always run in their canonical order, whatever the
    order of *whole_document_stages*.

    Raises:
        ValueError: if a stage name is unknown.
    """
    requested = set(whole_document_stages)
    unknown = requested - set(WHOLE_DOCUMENT_STAGES)
    if unknown:
        raise ValueError(
            f"Unknown analysis stages {sorted(unknown)}. "
            f"Choose from: {list(WHOLE_DOCUMENT_STAGES)}"
        )

    plan = [
        StageDefinition(
            template=templates[COMPLIANCE],
            chunk=chunk,
            chunk_count=len(chunks),
            include_recommendations=recommendations_enabled and chunk.index == 0,
        )
        for chunk in chunks
    ]
    plan.extend(
        StageDefinition(template=templates[name])
        for name in WHOLE_DOCUMENT_STAGES
        if name in requested
    )
    return plan


def describe_result(definition: StageDefinition, value: StageResult) -> str:
    """One log line summarising a successful stage."""
    if isinstance(value, ComplianceChunkResult):
        chunk_number = definition.chunk.index + 1 if definition.chunk else 1
        line = f"Found {len(value.findings)} compliance issues in chunk {chunk_number}."
        if value.recommendations:
            line += f" {len(value.recommendations)} journal recommendations."
        return line
    if isinstance(value, ScoreReport):
        return (
            f"Scoring complete. Compliance score: {value.compliance_score.score}, "
            f"acceptance likelihood: {value.editor_acceptance_likelihood.score}."
        )
    if isinstance(value, MetadataReport):
        return f"Metadata extracted. Predicted section type: {value.predicted_section_type}."
    if isinstance(value, PeerReviewSummary):
        return "Peer review simulation complete."
    title = STAGE_TITLES[definition.name].capitalize()
    return f"{title} complete: {len(value)} issues found."
