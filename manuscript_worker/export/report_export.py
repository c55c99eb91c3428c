"""Downloadable renderings of a finished job.

All functions are pure: they take a job snapshot and return text or a dict.
"""

import csv
import io
from collections.abc import Iterable
from dataclasses import asdict, fields, is_dataclass
from typing import Any

from manuscript_worker.analysis.models import (
    ComplianceFinding,
    JournalRecommendation,
    MetadataReport,
    PeerReviewSummary,
    ReadabilityIssue,
    ScoreReport,
    StructuralIssue,
)
from manuscript_worker.jobs.models import JobSnapshot


def _rows_to_csv(rows: Iterable[Iterable[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue()


def _title(name: str) -> str:
    return name.replace("_", " ").title()


def _scores(snapshot: JobSnapshot) -> ScoreReport | None:
    return snapshot.reports.get("scoring")


def to_csv(snapshot: JobSnapshot) -> str:
    """Sectioned CSV report. Sections without data are left out."""
    rows: list[list[object]] = [
        ["File Name", snapshot.name],
        ["Status", snapshot.status.value],
        [],
    ]
    reports = snapshot.reports

    scores: ScoreReport | None = reports.get("scoring")
    if scores is not None:
        rows.append(["## SCORING REPORT ##"])
        rows.append(["Metric", "Score", "Reasoning"])
        for score_field in fields(scores):
            score = getattr(scores, score_field.name)
            rows.append([_title(score_field.name), score.score, score.reasoning])
        rows.append([])

    review: PeerReviewSummary | None = reports.get("peer_review")
    if review is not None:
        rows.append(["## PEER REVIEW SIMULATION ##"])
        rows.append(["Summary", review.manuscript_summary])
        rows.append(["Suitability", review.suitability_for_peer_review])
        rows.append(["Strengths", "; ".join(review.strengths)])
        rows.append(["Weaknesses", "; ".join(review.weaknesses)])
        rows.append(["Reviewer Concerns", "; ".join(review.reviewer_concerns)])
        rows.append(["Methodological Gaps", review.methodological_gaps])
        rows.append(["Reviewer Questions", "; ".join(review.reviewer_questions)])
        rows.append([])

    findings: list[ComplianceFinding] = reports.get("compliance") or []
    if findings:
        rows.append(["## COMPLIANCE REPORT ##"])
        rows.append([
            "Status", "Category", "Summary", "Manuscript Quote",
            "Manuscript Page", "Rule Content", "Rule Page", "Recommendation",
        ])
        for f in findings:
            rows.append([
                f.status, f.check_category, f.summary, f.manuscript_quote,
                f.manuscript_page, f.rule_content, f.rule_page, f.recommendation,
            ])
        rows.append([])

    structural: list[StructuralIssue] = reports.get("structural") or []
    if structural:
        rows.append(["## STRUCTURAL ANALYSIS REPORT ##"])
        rows.append(["Priority", "Category", "Location", "Summary", "Details", "Recommendation"])
        for s in structural:
            rows.append([s.priority, s.issue_category, s.location, s.summary, s.details, s.recommendation])
        rows.append([])

    readability: list[ReadabilityIssue] = reports.get("readability") or []
    if readability:
        rows.append(["## READABILITY ANALYSIS REPORT ##"])
        rows.append([
            "Priority", "Category", "Location", "Summary", "Details", "Quote", "Recommendation",
        ])
        for r in readability:
            rows.append([
                r.priority, r.issue_category, r.location, r.summary, r.details, r.quote,
                r.recommendation,
            ])
        rows.append([])

    recommendations: list[JournalRecommendation] = reports.get("recommendations") or []
    if recommendations:
        rows.append(["## JOURNAL RECOMMENDATIONS ##"])
        rows.append(["Journal Name", "Publisher", "ISSN", "Field", "Reasoning"])
        for rec in recommendations:
            rows.append([rec.journal_name, rec.publisher, rec.issn, rec.field, rec.reasoning])
        rows.append([])

    metadata: MetadataReport | None = reports.get("metadata")
    if metadata is not None:
        rows.append(["## METADATA ANALYSIS REPORT ##"])
        rows.append(["Category", "Details"])
        rows.append(["Predicted Section Type", metadata.predicted_section_type])
        rows.append(["Generated Keywords", ", ".join(metadata.generated_keywords)])
        author = metadata.corresponding_author
        rows.append([
            "Corresponding Author",
            f"Name: {author.name}, Email: {author.email or ''}, "
            f"Affiliation: {author.affiliation or ''}, Complete: {author.is_complete}",
        ])
        for o in metadata.orcid_validation:
            rows.append([
                "ORCID Validation",
                f"Author: {o.author_name}, ORCID: {o.orcid}, Valid: {o.is_valid}",
            ])
        for funding in metadata.funding_metadata:
            rows.append([
                "Funding",
                f"Funder: {funding.funder_name}, Grant: {funding.grant_number or ''}",
            ])
        for t in metadata.suggested_taxonomy:
            rows.append([f"Taxonomy ({t.scheme})", ", ".join(t.tags)])
        rows.append([])

    return _rows_to_csv(rows)


def to_log_text(snapshot: JobSnapshot) -> str:
    """Plain-text report: the processing log followed by every finding."""
    lines = [
        "MANUSCRIPT ANALYSIS LOG",
        f"File: {snapshot.name}",
        f"Status: {snapshot.status.value}",
        "",
        "PROCESS LOG:",
        snapshot.render_log(),
    ]

    findings: list[ComplianceFinding] = snapshot.reports.get("compliance") or []
    if findings:
        lines += ["", "COMPLIANCE FINDINGS:"]
        for f in findings:
            lines += [
                "",
                f"[{f.status.upper()}] {f.check_category}",
                f"Summary: {f.summary}",
                f"Manuscript (p. {f.manuscript_page}): \"{f.manuscript_quote}\"",
                f"Rule (p. {f.rule_page}): \"{f.rule_content}\"",
                f"Recommendation: {f.recommendation}",
            ]

    for key, heading in (("structural", "STRUCTURAL ISSUES:"), ("readability", "READABILITY ISSUES:")):
        issues = snapshot.reports.get(key) or []
        if not issues:
            continue
        lines += ["", heading]
        for issue in issues:
            lines += [
                "",
                f"[{issue.priority.upper()}] {issue.issue_category}",
                f"Location: {issue.location}",
                f"Summary: {issue.summary}",
                f"Details: {issue.details}",
                f"Recommendation: {issue.recommendation}",
            ]

    return "\n".join(lines) + "\n"


def to_flat_record(snapshot: JobSnapshot) -> dict[str, str]:
    """One flat row per job, for spreadsheets and the usage dashboard."""
    reports = snapshot.reports
    findings: list[ComplianceFinding] = reports.get("compliance") or []
    record = {
        "id": snapshot.id,
        "name": snapshot.name,
        "status": snapshot.status.value,
        "progress": str(snapshot.progress),
        "compliance_findings": str(len(findings)),
        "compliance_failures": str(sum(1 for f in findings if f.status == "fail")),
        "journal_recommendations": str(len(reports.get("recommendations") or [])),
        "structural_issues": _count(reports.get("structural")),
        "readability_issues": _count(reports.get("readability")),
    }

    scores = _scores(snapshot)
    for score_field in fields(ScoreReport):
        value = getattr(scores, score_field.name).score if scores is not None else None
        record[score_field.name] = "" if value is None else str(value)

    metadata: MetadataReport | None = reports.get("metadata")
    record["predicted_section_type"] = metadata.predicted_section_type if metadata else ""
    record["keywords"] = "; ".join(metadata.generated_keywords) if metadata else ""
    return record


def _count(items: list[object] | None) -> str:
    return "" if items is None else str(len(items))


def to_json_dict(snapshot: JobSnapshot) -> dict[str, Any]:
    """JSON-ready view of the job: status, log and every report."""
    return {
        "id": snapshot.id,
        "name": snapshot.name,
        "status": snapshot.status.value,
        "progress": snapshot.progress,
        "log": [
            {"timestamp": entry.timestamp.isoformat(), "message": entry.message}
            for entry in snapshot.log
        ],
        "reports": {key: _plain(value) for key, value in snapshot.reports.items()},
    }


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value
