"""AI-powered manuscript analysis calls."""

import json

from manuscript_worker.analysis.client_base import BaseAnalysisClient, ChatCompletion
from manuscript_worker.analysis.exceptions import AnalysisValidationError
from manuscript_worker.analysis.models import AnalysisResponse
from manuscript_worker.logging.logger import Log
from manuscript_worker.retry.backoff import BackoffExecutor, RetryCallback

DEFAULT_SYSTEM_PROMPT = (
    "You are an assistant for academic and book publishers. "
    "Answer with a single JSON object that matches the requested schema."
)


class AnalysisService:
    """Sends one analysis prompt to the AI provider and parses the JSON answer.

    Every call goes through the BackoffExecutor, so transient provider errors
    are retried here and nowhere else.
    """

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        executor: BackoffExecutor,
        temperature: float = 0.0,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._executor = executor
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt

    @property
    def model(self) -> str:
        return self._model

    @property
    def max_attempts(self) -> int:
        return self._executor.max_attempts

    async def call(
        self,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        on_retry: RetryCallback | None = None,
    ) -> AnalysisResponse:
        """Send *prompt* and return the parsed object with its token usage.

        Raises:
            TransientServiceError: retries exhausted.
            PermanentServiceError: provider rejected the request.
            AnalysisValidationError: the answer is not a JSON object.
        """
        Log.debug(f"Analysis prompt for {schema_name}:\n{prompt}")

        async def attempt() -> ChatCompletion:
            return await self._client.create_chat_completion(
                model=self._model,
                temperature=self._temperature,
                system_prompt=self._system_prompt,
                user_prompt=prompt,
                schema_name=schema_name,
                json_schema=schema,
            )

        completion = await self._executor.execute(attempt, on_retry=on_retry)
        Log.debug(f"AI raw response for {schema_name}:\n{completion.content}")

        return AnalysisResponse(
            payload=self._parse_json(completion.content),
            prompt_tokens=completion.prompt_tokens,
            response_tokens=completion.response_tokens,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise AnalysisValidationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise AnalysisValidationError("JSON response must be an object")
        return parsed
