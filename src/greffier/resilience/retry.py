"""
Retry pattern with exponential backoff and jitter.

Only read-only RPC queries go through here. Transaction submission is
never retried: resending signed bytes that already landed would execute
the instructions twice.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from greffier.reporter import SystemReporter


@dataclass
class RetryPolicy:
    """Backoff parameters for one retry profile."""

    max_attempts: int = 3
    """Maximum number of attempts (including initial attempt)"""

    initial_delay: float = 0.5
    """Initial delay between retries in seconds"""

    max_delay: float = 5.0
    """Maximum delay between retries in seconds"""

    exponential_base: float = 2.0
    """Multiplier applied per attempt"""

    jitter: bool = True
    """Add +/-10% random jitter to each delay"""

    retry_on: tuple = (Exception,)
    """Exception types to retry on"""

    @classmethod
    def from_config(cls, config: Any, retry_on: tuple = (Exception,)) -> "RetryPolicy":
        """Build from a settings RetryConfig."""
        return cls(
            max_attempts=config.max_attempts,
            initial_delay=config.initial_delay,
            max_delay=config.max_delay,
            exponential_base=config.exponential_base,
            jitter=config.jitter,
            retry_on=retry_on,
        )


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_exception = last_exception


class Retry:
    """
    Async retry handler.

    Example:
        retry = Retry("rpc_query", RetryPolicy(max_attempts=5))
        height = await retry.execute_async(client.get_block_height)
    """

    def __init__(
        self,
        name: str,
        policy: Optional[RetryPolicy] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        self.name = name
        self.policy = policy or RetryPolicy()
        self.reporter = reporter or SystemReporter(name="greffier.retry")

    def _calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay for current attempt.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay = self.policy.initial_delay * (self.policy.exponential_base**attempt)
        delay = min(delay, self.policy.max_delay)

        if self.policy.jitter:
            jitter_range = delay * 0.1
            delay = max(0.0, delay + random.uniform(-jitter_range, jitter_range))

        return delay

    async def execute_async(
        self, func: Callable[..., Awaitable[Any]], *args, **kwargs
    ) -> Any:
        """
        Execute async function with retry logic.

        Args:
            func: Async function to execute
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            Function result

        Raises:
            RetryError: When all attempts exhausted
        """
        for attempt in range(self.policy.max_attempts):
            try:
                result = await func(*args, **kwargs)
                if attempt > 0:
                    self.reporter.info(
                        f"{self.name} succeeded on attempt "
                        f"{attempt + 1}/{self.policy.max_attempts}",
                        context="Retry",
                        verbose_level=2,
                    )
                return result

            except self.policy.retry_on as e:
                if attempt >= self.policy.max_attempts - 1:
                    raise RetryError(
                        f"{self.name}: all {self.policy.max_attempts} attempts "
                        f"exhausted. Last error: {type(e).__name__}: {e}",
                        attempts=self.policy.max_attempts,
                        last_exception=e,
                    ) from e

                delay = self._calculate_delay(attempt)
                self.reporter.warning(
                    f"{self.name}: {type(e).__name__}: {e}. "
                    f"Attempt {attempt + 1}/{self.policy.max_attempts}. "
                    f"Retrying in {delay:.2f}s...",
                    context="Retry",
                )
                await asyncio.sleep(delay)

        raise RetryError(
            f"{self.name}: no attempts made",
            attempts=self.policy.max_attempts,
        )
