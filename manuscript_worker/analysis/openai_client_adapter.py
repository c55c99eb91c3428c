import httpx
import openai

from manuscript_worker.analysis.client_base import BaseAnalysisClient, ChatCompletion
from manuscript_worker.analysis.exceptions import (
    PermanentServiceError,
    TransientServiceError,
)

_UNAVAILABLE_STATUS_CODES = frozenset({503})
_TRANSIENT_MARKERS = ("RESOURCE_EXHAUSTED", "UNAVAILABLE")


class OpenAIClientAdapter(BaseAnalysisClient):
    """Analysis AI client adapter built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        # Retries belong to BackoffExecutor, not to the SDK.
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        json_schema: dict[str, object],
    ) -> ChatCompletion:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except openai.RateLimitError as exc:
            raise TransientServiceError(f"AI provider rate limit: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise TransientServiceError(f"AI provider network error: {exc}") from exc
        except openai.APIStatusError as exc:
            if exc.status_code in _UNAVAILABLE_STATUS_CODES or _mentions_transient(exc):
                raise TransientServiceError(
                    f"AI provider unavailable ({exc.status_code}): {exc}"
                ) from exc
            raise PermanentServiceError(
                f"AI provider API error ({exc.status_code}): {exc}"
            ) from exc
        except openai.APIError as exc:
            raise PermanentServiceError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise PermanentServiceError("AI returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise PermanentServiceError("AI returned empty response")

        usage = response.usage
        return ChatCompletion(
            content=content,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            response_tokens=usage.completion_tokens if usage else 0,
        )


def _mentions_transient(exc: openai.APIStatusError) -> bool:
    message = str(exc)
    return any(marker in message for marker in _TRANSIENT_MARKERS)
