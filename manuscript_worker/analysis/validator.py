"""Validates parsed provider JSON and builds the typed stage results.

The provider is asked for a JSON schema per stage but its output is never
trusted: every builder checks types, coerces harmless variations (float page
numbers, lowercase priorities, out-of-range scores) and raises
AnalysisValidationError for anything else.
"""

from typing import Any

from manuscript_worker.analysis.exceptions import AnalysisValidationError
from manuscript_worker.analysis.models import (
    ComplianceChunkResult,
    ComplianceFinding,
    CorrespondingAuthor,
    FundingEntry,
    JournalRecommendation,
    MetadataReport,
    OrcidCheck,
    PeerReviewSummary,
    ReadabilityIssue,
    Score,
    ScoreReport,
    StructuralIssue,
    TaxonomySuggestion,
)

_FINDING_STATUSES = frozenset({"pass", "fail", "warn"})
_PRIORITIES = {"high": "High", "medium": "Medium", "low": "Low"}
_MAX_ITEMS = 500

SCORE_FIELDS = (
    "compliance_score",
    "scientific_quality_score",
    "writing_quality_score",
    "citation_maturity_score",
    "novelty_score",
    "data_integrity_risk_score",
    "editor_acceptance_likelihood",
)


# ----------------------------------------------------------------------
# Stage builders
# ----------------------------------------------------------------------


def build_compliance_result(
    data: dict[str, Any],
    include_recommendations: bool,
) -> ComplianceChunkResult:
    """Build the compliance result for one chunk.

    Recommendations are dropped unless *include_recommendations* is set, even
    when the provider returned some.
    """
    findings = [
        _build_finding(item, i)
        for i, item in enumerate(_require_list(data, "compliance_findings", "response"))
    ]
    recommendations: list[JournalRecommendation] = []
    if include_recommendations and data.get("journal_recommendations") is not None:
        recommendations = [
            _build_recommendation(item, i)
            for i, item in enumerate(
                _require_list(data, "journal_recommendations", "response")
            )
        ]
    return ComplianceChunkResult(findings=findings, recommendations=recommendations)


def build_structural_issues(data: dict[str, Any]) -> list[StructuralIssue]:
    issues: list[StructuralIssue] = []
    for i, raw in enumerate(_require_list(data, "issues", "response")):
        where = f"Issue at index {i}"
        item = _require_object(raw, where)
        issues.append(
            StructuralIssue(
                issue_category=_require_str(item, "issue_category", where),
                priority=_build_priority(item, where),
                summary=_require_str(item, "summary", where),
                details=_require_str(item, "details", where),
                location=_require_str(item, "location", where),
                recommendation=_require_str(item, "recommendation", where),
            )
        )
    return issues


def build_readability_issues(data: dict[str, Any]) -> list[ReadabilityIssue]:
    issues: list[ReadabilityIssue] = []
    for i, raw in enumerate(_require_list(data, "issues", "response")):
        where = f"Issue at index {i}"
        item = _require_object(raw, where)
        issues.append(
            ReadabilityIssue(
                issue_category=_require_str(item, "issue_category", where),
                priority=_build_priority(item, where),
                summary=_require_str(item, "summary", where),
                details=_require_str(item, "details", where),
                location=_require_str(item, "location", where),
                recommendation=_require_str(item, "recommendation", where),
                quote=_optional_str(item, "quote", where),
            )
        )
    return issues


def build_score_report(data: dict[str, Any]) -> ScoreReport:
    scores = {name: _build_score(data.get(name), name) for name in SCORE_FIELDS}
    return ScoreReport(**scores)


def build_metadata_report(data: dict[str, Any]) -> MetadataReport:
    author_raw = _require_object(data.get("corresponding_author"), "'corresponding_author'")
    author = CorrespondingAuthor(
        name=_require_str(author_raw, "name", "'corresponding_author'", allow_empty=True),
        email=_optional_str(author_raw, "email", "'corresponding_author'"),
        affiliation=_optional_str(author_raw, "affiliation", "'corresponding_author'"),
        is_complete=_require_bool(author_raw, "is_complete", "'corresponding_author'"),
    )

    orcids: list[OrcidCheck] = []
    for i, raw in enumerate(_require_list(data, "orcid_validation", "response")):
        where = f"ORCID entry at index {i}"
        item = _require_object(raw, where)
        orcids.append(
            OrcidCheck(
                author_name=_require_str(item, "author_name", where),
                orcid=_require_str(item, "orcid", where),
                is_valid=_require_bool(item, "is_valid", where),
            )
        )

    funding: list[FundingEntry] = []
    for i, raw in enumerate(_require_list(data, "funding_metadata", "response")):
        where = f"Funding entry at index {i}"
        item = _require_object(raw, where)
        funding.append(
            FundingEntry(
                funder_name=_require_str(item, "funder_name", where),
                grant_number=_optional_str(item, "grant_number", where),
            )
        )

    taxonomy: list[TaxonomySuggestion] = []
    for i, raw in enumerate(_require_list(data, "suggested_taxonomy", "response")):
        where = f"Taxonomy entry at index {i}"
        item = _require_object(raw, where)
        taxonomy.append(
            TaxonomySuggestion(
                scheme=_require_str(item, "scheme", where),
                tags=_string_list(item, "tags", where),
            )
        )

    return MetadataReport(
        predicted_section_type=_require_str(data, "predicted_section_type", "response"),
        generated_keywords=_string_list(data, "generated_keywords", "response"),
        corresponding_author=author,
        orcid_validation=orcids,
        funding_metadata=funding,
        suggested_taxonomy=taxonomy,
    )


def build_peer_review(data: dict[str, Any]) -> PeerReviewSummary:
    return PeerReviewSummary(
        manuscript_summary=_require_str(data, "manuscript_summary", "response"),
        strengths=_string_list(data, "strengths", "response"),
        weaknesses=_string_list(data, "weaknesses", "response"),
        reviewer_concerns=_string_list(data, "reviewer_concerns", "response"),
        methodological_gaps=_require_str(data, "methodological_gaps", "response"),
        reviewer_questions=_string_list(data, "reviewer_questions", "response"),
        suitability_for_peer_review=_require_str(
            data, "suitability_for_peer_review", "response"
        ),
    )


# ----------------------------------------------------------------------
# Item builders
# ----------------------------------------------------------------------


def _build_finding(raw: Any, index: int) -> ComplianceFinding:
    where = f"Finding at index {index}"
    item = _require_object(raw, where)
    status = _require_str(item, "status", where).strip().lower()
    if status not in _FINDING_STATUSES:
        raise AnalysisValidationError(
            f"{where}: 'status' must be one of {sorted(_FINDING_STATUSES)}, got {status!r}"
        )
    return ComplianceFinding(
        check_category=_require_str(item, "check_category", where),
        status=status,
        summary=_require_str(item, "summary", where),
        manuscript_quote=_require_str(item, "manuscript_quote", where, allow_empty=True),
        manuscript_page=_require_page(item, "manuscript_page", where),
        rule_content=_require_str(item, "rule_content", where, allow_empty=True),
        rule_page=_require_page(item, "rule_page", where),
        recommendation=_require_str(item, "recommendation", where, allow_empty=True),
    )


def _build_recommendation(raw: Any, index: int) -> JournalRecommendation:
    where = f"Recommendation at index {index}"
    item = _require_object(raw, where)
    return JournalRecommendation(
        journal_name=_require_str(item, "journal_name", where),
        publisher=_require_str(item, "publisher", where),
        field=_require_str(item, "field", where),
        reasoning=_require_str(item, "reasoning", where),
        issn=_optional_str(item, "issn", where),
    )


def _build_priority(item: dict[str, Any], where: str) -> str:
    raw = _require_str(item, "priority", where)
    priority = _PRIORITIES.get(raw.strip().lower())
    if priority is None:
        raise AnalysisValidationError(
            f"{where}: 'priority' must be one of {sorted(_PRIORITIES.values())}, got {raw!r}"
        )
    return priority


def _build_score(raw: Any, name: str) -> Score:
    where = f"'{name}'"
    item = _require_object(raw, where)
    value = item.get("score")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AnalysisValidationError(f"{where}: 'score' must be a number")
    clamped = max(0, min(100, round(value)))
    return Score(score=clamped, reasoning=_require_str(item, "reasoning", where, allow_empty=True))


# ----------------------------------------------------------------------
# Primitive checks
# ----------------------------------------------------------------------


def _require_object(raw: Any, where: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise AnalysisValidationError(f"{where} must be an object")
    return raw


def _require_list(data: dict[str, Any], key: str, where: str) -> list[Any]:
    raw = data.get(key)
    if not isinstance(raw, list):
        raise AnalysisValidationError(f"{where}: '{key}' must be a list")
    if len(raw) > _MAX_ITEMS:
        raise AnalysisValidationError(
            f"{where}: too many entries in '{key}': {len(raw)} (max {_MAX_ITEMS})"
        )
    return raw


def _require_str(
    data: dict[str, Any],
    key: str,
    where: str,
    allow_empty: bool = False,
) -> str:
    raw = data.get(key)
    if not isinstance(raw, str) or (not allow_empty and not raw.strip()):
        qualifier = "a string" if allow_empty else "a non-empty string"
        raise AnalysisValidationError(f"{where}: '{key}' must be {qualifier}")
    return raw


def _optional_str(data: dict[str, Any], key: str, where: str) -> str | None:
    raw = data.get(key)
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise AnalysisValidationError(f"{where}: '{key}' must be a string or null")
    return raw or None


def _require_bool(data: dict[str, Any], key: str, where: str) -> bool:
    raw = data.get(key)
    if not isinstance(raw, bool):
        raise AnalysisValidationError(f"{where}: '{key}' must be a boolean")
    return raw


def _require_page(data: dict[str, Any], key: str, where: str) -> int:
    raw = data.get(key)
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AnalysisValidationError(f"{where}: '{key}' must be a number")
    return int(raw)


def _string_list(data: dict[str, Any], key: str, where: str) -> list[str]:
    items = _require_list(data, key, where)
    if not all(isinstance(item, str) for item in items):
        raise AnalysisValidationError(f"{where}: '{key}' must contain only strings")
    return list(items)
