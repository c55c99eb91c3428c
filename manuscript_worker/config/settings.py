from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

StageName = Literal["structural", "readability", "scoring", "metadata", "peer_review"]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "manuscripts"
    db_username: str = "manuscripts"
    db_password: str = "secret"
    persist_results: bool = False

    files_root: str = "."
    pdf_engine: str = "pdfplumber"
    docx_words_per_page: int = Field(default=300, ge=1)

    chunk_pages: int = Field(default=25, ge=1)
    max_retries: int = Field(default=5, ge=1)
    initial_retry_delay_ms: int = Field(default=2000, ge=0)
    chunk_delay_ms: int = Field(default=1500, ge=0)
    recommendations_enabled: bool = True
    whole_document_stages: list[StageName] = [
        "structural",
        "readability",
        "scoring",
        "metadata",
        "peer_review",
    ]

    analysis_provider: str = "openai"
    analysis_api_key: str = ""
    analysis_model_name: str = "gpt-4o-mini"
    analysis_base_url: str | None = None
    analysis_timeout_seconds: int = 120
    analysis_temperature: float = 0.0

    user_id: int = 1
    tool_name: str = "Manuscript Compliance Checker"
