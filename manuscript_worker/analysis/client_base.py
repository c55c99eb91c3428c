from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChatCompletion:
    """Raw provider text plus the token counts it reported."""

    content: str
    prompt_tokens: int = 0
    response_tokens: int = 0


class BaseAnalysisClient(ABC):
    """Contract for provider-specific analysis AI clients."""

    @abstractmethod
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
        """Return the provider response.

        Raises:
            TransientServiceError: rate limited or temporarily unavailable.
            PermanentServiceError: any other provider failure.
        """
