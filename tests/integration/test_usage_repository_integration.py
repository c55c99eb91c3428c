import uuid

import pytest

from manuscript_worker.database.repositories.usage_repository import UsageRepository
from manuscript_worker.jobs.usage import UsageEntry


@pytest.mark.integration
class TestUsageRepository:
    def test_record_then_find_by_user(self, integration_cleanup: list[tuple[str, str]]) -> None:
        output_id = uuid.uuid4().hex
        integration_cleanup.append(("usage_logs", output_id))
        user_id = 900_000 + uuid.uuid4().int % 1000
        repo = UsageRepository()

        repo.record(UsageEntry(
            user_id=user_id,
            tool_name="Manuscript Compliance Checker",
            model_name="gpt-4o-mini",
            output_id=output_id,
            output_name="paper.pdf",
            calls=8,
            prompt_tokens=100,
            response_tokens=20,
        ))

        records = [r for r in repo.find_by_user(user_id) if r.output_id == output_id]
        assert len(records) == 1
        assert records[0].calls == 8
        assert records[0].prompt_tokens == 100
        assert records[0].created_at is not None
