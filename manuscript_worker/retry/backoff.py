"""Bounded retry with exponential delay for calls to the AI provider."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from manuscript_worker.analysis.exceptions import TransientServiceError
from manuscript_worker.logging.logger import Log

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_INITIAL_DELAY_SECONDS = 2.0

RetryCallback = Callable[[int, float, BaseException], None]


def is_transient(exc: BaseException) -> bool:
    """Only rate-limit and unavailability signals are worth retrying."""
    return isinstance(exc, TransientServiceError)


class BackoffExecutor:
    """Run an async operation, retrying transient failures with doubling delays.

    With the defaults an operation that keeps failing transiently is attempted
    five times, sleeping 2s, 4s, 8s and 16s in between. Permanent failures are
    raised after the first attempt. There is no sleep after the last attempt.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self._max_attempts = max_attempts
        self._initial_delay = initial_delay_seconds
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: RetryCallback | None = None,
    ) -> T:
        """Await ``operation()`` until it succeeds or can no longer be retried.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt.
            on_retry: Called as ``on_retry(attempt, delay_seconds, exc)`` right
                before each sleep.

        Raises:
            The last exception raised by the operation.
        """
        delay = self._initial_delay
        attempt = 0
        while True:
            attempt += 1
            try:
                return await operation()
            except Exception as exc:
                if not is_transient(exc):
                    Log.debug(f"Non-retriable error on attempt {attempt}: {exc}")
                    raise
                if attempt >= self._max_attempts:
                    Log.error(
                        f"Giving up after {attempt}/{self._max_attempts} attempts: {exc}"
                    )
                    raise
                Log.warning(
                    f"Retriable error detected. Retrying in {delay:g}s... "
                    f"(Attempt {attempt}/{self._max_attempts})"
                )
                if on_retry is not None:
                    on_retry(attempt, delay, exc)
                await self._sleep(delay)
                delay *= 2
