from psycopg.rows import dict_row

from manuscript_worker.database.connection import get_connection
from manuscript_worker.database.models import UsageRecord
from manuscript_worker.jobs.usage import UsageEntry, UsageRecorder


class UsageRepository(UsageRecorder):
    """Database operations for the usage_logs table."""

    def record(self, entry: UsageEntry) -> None:
        """Insert one usage entry."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO usage_logs
                    (user_id, tool_name, model_name, output_id, output_name,
                     calls, prompt_tokens, response_tokens, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    entry.user_id,
                    entry.tool_name,
                    entry.model_name,
                    entry.output_id,
                    entry.output_name,
                    entry.calls,
                    entry.prompt_tokens,
                    entry.response_tokens,
                    entry.timestamp,
                ),
            )
            conn.commit()

    def find_by_user(self, user_id: int) -> list[UsageRecord]:
        """All usage rows of a user, oldest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, tool_name, model_name, output_id,
                           output_name, calls, prompt_tokens, response_tokens, created_at
                    FROM usage_logs
                    WHERE user_id = %s
                    ORDER BY created_at
                    """,
                    (user_id,),
                )
                rows = cur.fetchall()

        return [
            UsageRecord(
                id=row["id"],
                user_id=row["user_id"],
                tool_name=row["tool_name"],
                model_name=row["model_name"],
                output_id=row["output_id"],
                output_name=row["output_name"],
                calls=row["calls"],
                prompt_tokens=row["prompt_tokens"],
                response_tokens=row["response_tokens"],
                created_at=row["created_at"],
            )
            for row in rows
        ]
