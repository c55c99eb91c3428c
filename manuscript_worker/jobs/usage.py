"""Per-document record of AI usage, kept for the usage dashboard."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from manuscript_worker.analysis.models import AnalysisResponse


@dataclass(frozen=True)
class UsageEntry:
    user_id: int
    tool_name: str
    model_name: str
    output_id: str
    output_name: str
    calls: int
    prompt_tokens: int
    response_tokens: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.response_tokens


@dataclass
class UsageTally:
    """Running totals of the analysis calls made for one job."""

    calls: int = 0
    prompt_tokens: int = 0
    response_tokens: int = 0

    def add(self, response: AnalysisResponse) -> None:
        self.calls += 1
        self.prompt_tokens += response.prompt_tokens
        self.response_tokens += response.response_tokens


class UsageRecorder(ABC):
    """Sink for usage entries."""

    @abstractmethod
    def record(self, entry: UsageEntry) -> None:
        """Store one usage entry."""


class InMemoryUsageLedger(UsageRecorder):
    def __init__(self) -> None:
        self._entries: list[UsageEntry] = []

    def record(self, entry: UsageEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> tuple[UsageEntry, ...]:
        return tuple(self._entries)

    def total_tokens_for_user(self, user_id: int) -> int:
        return sum(e.total_tokens for e in self._entries if e.user_id == user_id)
