import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from manuscript_worker.analysis.client_base import ChatCompletion
from manuscript_worker.analysis.exceptions import (
    AnalysisValidationError,
    PermanentServiceError,
    TransientServiceError,
)
from manuscript_worker.analysis.service import AnalysisService
from manuscript_worker.retry.backoff import BackoffExecutor


async def _no_sleep(_delay: float) -> None:
    return None


def _make_service(*results: object, temperature: float = 0.0) -> tuple[AnalysisService, MagicMock]:
    client = MagicMock()
    client.create_chat_completion = AsyncMock(side_effect=list(results))
    service = AnalysisService(
        client=client,
        model="test-model",
        executor=BackoffExecutor(3, initial_delay_seconds=1.0, sleep=_no_sleep),
        temperature=temperature,
    )
    return service, client


def _call(service: AnalysisService, on_retry=None):
    return asyncio.run(service.call("prompt", "scoring_result", {"type": "object"}, on_retry))


class TestAnalysisService:
    def test_parses_json_and_usage(self) -> None:
        service, client = _make_service(ChatCompletion('{"a": 1}', 5, 3))
        response = _call(service)
        assert response.payload == {"a": 1}
        assert response.prompt_tokens == 5
        assert response.response_tokens == 3
        kwargs = client.create_chat_completion.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["schema_name"] == "scoring_result"
        assert kwargs["user_prompt"] == "prompt"

    def test_strips_code_fences(self) -> None:
        service, _client = _make_service(ChatCompletion('```json\n{"a": 2}\n```'))
        assert _call(service).payload == {"a": 2}

    def test_invalid_json_is_validation_error(self) -> None:
        service, _client = _make_service(ChatCompletion("not json"))
        with pytest.raises(AnalysisValidationError, match="Invalid JSON"):
            _call(service)

    def test_non_object_json_is_validation_error(self) -> None:
        service, _client = _make_service(ChatCompletion("[1, 2]"))
        with pytest.raises(AnalysisValidationError, match="must be an object"):
            _call(service)

    def test_retries_transient_errors(self) -> None:
        service, client = _make_service(
            TransientServiceError("busy"),
            ChatCompletion('{"ok": true}'),
        )
        retries: list[int] = []
        response = _call(service, on_retry=lambda attempt, _d, _e: retries.append(attempt))
        assert response.payload == {"ok": True}
        assert client.create_chat_completion.await_count == 2
        assert retries == [1]

    def test_permanent_error_is_raised_immediately(self) -> None:
        service, client = _make_service(PermanentServiceError("rejected"))
        with pytest.raises(PermanentServiceError):
            _call(service)
        assert client.create_chat_completion.await_count == 1

    def test_temperature_is_clamped(self) -> None:
        service, client = _make_service(ChatCompletion("{}"), temperature=0.9)
        _call(service)
        assert client.create_chat_completion.call_args.kwargs["temperature"] == 0.2

    def test_exposes_model_and_attempts(self) -> None:
        service, _client = _make_service()
        assert service.model == "test-model"
        assert service.max_attempts == 3
