from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class ReportRecord:
    """Represents a row from the manuscript_reports table."""

    id: str
    name: str
    user_id: int
    status: str
    progress: int
    logs: list[dict[str, Any]]
    reports: dict[str, Any]
    updated_at: datetime | None = None


@dataclass
class UsageRecord:
    """Represents a row from the usage_logs table."""

    id: int
    user_id: int
    tool_name: str
    model_name: str
    output_id: str
    output_name: str
    calls: int
    prompt_tokens: int
    response_tokens: int
    created_at: datetime | None = None
