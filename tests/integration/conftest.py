import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from manuscript_worker.config.settings import Settings
from manuscript_worker.database.connection import close_pool, get_connection, init_pool

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS manuscript_reports (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        source_ref TEXT NOT NULL,
        profile_id TEXT NOT NULL,
        user_id INTEGER NOT NULL,
        status TEXT NOT NULL,
        progress INTEGER NOT NULL,
        logs JSONB NOT NULL,
        reports JSONB NOT NULL,
        updated_at TIMESTAMPTZ
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS usage_logs (
        id BIGSERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL,
        tool_name TEXT NOT NULL,
        model_name TEXT NOT NULL,
        output_id TEXT NOT NULL,
        output_name TEXT NOT NULL,
        calls INTEGER NOT NULL,
        prompt_tokens INTEGER NOT NULL,
        response_tokens INTEGER NOT NULL,
        created_at TIMESTAMPTZ NOT NULL
    )
    """,
)


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "manuscripts_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            for statement in _SCHEMA:
                conn.execute(statement)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[tuple[str, str]], None, None]:
    cleanup: list[tuple[str, str]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table, key in cleanup:
                if table == "manuscript_reports":
                    cur.execute("DELETE FROM manuscript_reports WHERE id = %s", (key,))
                elif table == "usage_logs":
                    cur.execute("DELETE FROM usage_logs WHERE output_id = %s", (key,))
        conn.commit()
