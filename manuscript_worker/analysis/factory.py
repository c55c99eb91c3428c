from typing import ClassVar

from manuscript_worker.analysis.example_client_adapter import ExampleClientAdapter
from manuscript_worker.analysis.openai_client_adapter import OpenAIClientAdapter
from manuscript_worker.analysis.service import AnalysisService
from manuscript_worker.config.settings import Settings
from manuscript_worker.retry.backoff import BackoffExecutor


class AnalysisServiceFactory:
    """Creates the analysis service for the configured provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
        "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
    }

    @classmethod
    def create(cls, settings: Settings) -> AnalysisService:
        """Create a configured analysis service from application settings."""
        provider = settings.analysis_provider.lower()
        executor = cls.create_executor(settings)
        if provider == "example":
            return AnalysisService(
                client=ExampleClientAdapter(),
                model="example",
                executor=executor,
            )
        client = OpenAIClientAdapter(
            api_key=settings.analysis_api_key,
            timeout_seconds=settings.analysis_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return AnalysisService(
            client=client,
            model=settings.analysis_model_name,
            executor=executor,
            temperature=settings.analysis_temperature,
        )

    @classmethod
    def create_executor(cls, settings: Settings) -> BackoffExecutor:
        return BackoffExecutor(
            max_attempts=settings.max_retries,
            initial_delay_seconds=settings.initial_retry_delay_ms / 1000,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = (settings.analysis_base_url or "").strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "analysis_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown analysis provider '{provider}'. Choose from: {supported}"
        )
