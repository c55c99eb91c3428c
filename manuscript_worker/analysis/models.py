from dataclasses import dataclass, field


@dataclass(frozen=True)
class ComplianceFinding:
    """One rule checked against a manuscript chunk."""

    check_category: str
    status: str  # "pass" | "fail" | "warn"
    summary: str
    manuscript_quote: str
    manuscript_page: int
    rule_content: str
    rule_page: int
    recommendation: str


@dataclass(frozen=True)
class JournalRecommendation:
    """A journal suggested as a submission target."""

    journal_name: str
    publisher: str
    field: str
    reasoning: str
    issn: str | None = None


@dataclass(frozen=True)
class ComplianceChunkResult:
    """Output of the compliance stage for a single chunk."""

    findings: list[ComplianceFinding] = field(default_factory=list)
    recommendations: list[JournalRecommendation] = field(default_factory=list)


@dataclass(frozen=True)
class StructuralIssue:
    """A book-level structural problem (chapter order, completeness, ...)."""

    issue_category: str
    priority: str  # "High" | "Medium" | "Low"
    summary: str
    details: str
    location: str
    recommendation: str


@dataclass(frozen=True)
class ReadabilityIssue:
    """A readability or tone problem located in the manuscript."""

    issue_category: str
    priority: str
    summary: str
    details: str
    location: str
    recommendation: str
    quote: str | None = None


@dataclass(frozen=True)
class Score:
    score: int
    reasoning: str


@dataclass(frozen=True)
class ScoreReport:
    """Fixed set of 0-100 quality scores.

    ``data_integrity_risk_score`` is a risk: higher is worse.
    """

    compliance_score: Score
    scientific_quality_score: Score
    writing_quality_score: Score
    citation_maturity_score: Score
    novelty_score: Score
    data_integrity_risk_score: Score
    editor_acceptance_likelihood: Score


@dataclass(frozen=True)
class CorrespondingAuthor:
    name: str
    email: str | None = None
    affiliation: str | None = None
    is_complete: bool = False


@dataclass(frozen=True)
class OrcidCheck:
    author_name: str
    orcid: str
    is_valid: bool


@dataclass(frozen=True)
class FundingEntry:
    funder_name: str
    grant_number: str | None = None


@dataclass(frozen=True)
class TaxonomySuggestion:
    scheme: str
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MetadataReport:
    """Bibliographic metadata extracted from the manuscript."""

    predicted_section_type: str
    generated_keywords: list[str]
    corresponding_author: CorrespondingAuthor
    orcid_validation: list[OrcidCheck] = field(default_factory=list)
    funding_metadata: list[FundingEntry] = field(default_factory=list)
    suggested_taxonomy: list[TaxonomySuggestion] = field(default_factory=list)


@dataclass(frozen=True)
class PeerReviewSummary:
    """Simulated reviewer response to the manuscript."""

    manuscript_summary: str
    strengths: list[str]
    weaknesses: list[str]
    reviewer_concerns: list[str]
    methodological_gaps: str
    reviewer_questions: list[str]
    suitability_for_peer_review: str


StageResult = (
    ComplianceChunkResult
    | list[StructuralIssue]
    | list[ReadabilityIssue]
    | ScoreReport
    | MetadataReport
    | PeerReviewSummary
)


@dataclass(frozen=True)
class AnalysisResponse:
    """Parsed provider response plus the token usage reported for it."""

    payload: dict[str, object]
    prompt_tokens: int = 0
    response_tokens: int = 0
