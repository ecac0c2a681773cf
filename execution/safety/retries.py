# Dispatch retries
"""Resending a task after transport failures (single attempt unless configured)"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type
import asyncio
import random
import logging

from execution.models import AgentUnreachableError

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """
    Retry policy for one dispatch

    Only failures where the agent never saw the task are retryable, so a
    retry cannot make an agent evaluate the same task twice.
    """
    max_attempts: int = 1
    initial_delay_seconds: float = 0.5
    max_delay_seconds: float = 10.0
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_exceptions: Tuple[Type[Exception], ...] = (AgentUnreachableError,)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def delay_after(self, attempt: int) -> float:
        """Backoff before the attempt following attempt (1-based)"""
        delay = min(
            self.initial_delay_seconds * self.exponential_base ** (attempt - 1),
            self.max_delay_seconds,
        )
        if self.jitter:
            # ±25%
            delay += random.uniform(-delay * 0.25, delay * 0.25)
        return max(0.0, delay)


class RetryStrategy:
    """Runs a send under the coordinator's RetryConfig"""

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()

    async def execute(
        self,
        func: Callable[..., Awaitable[Any]],
        *args,
        agent_id: Optional[str] = None,
        **kwargs,
    ) -> Any:
        """
        Await func, resending after retryable failures

        Non-retryable exceptions propagate on the first occurrence; the last
        retryable one propagates once attempts run out.

        Args:
            func: Coroutine function performing the send
            agent_id: Target agent, for logging
        """
        config = self.config
        attempt = 1
        while True:
            try:
                result = await func(*args, **kwargs)
            except config.retryable_exceptions as e:
                if attempt >= config.max_attempts:
                    if config.max_attempts > 1:
                        logger.error(
                            f"Giving up on agent {agent_id or 'unknown'} "
                            f"after {attempt} attempts: {e}"
                        )
                    raise
                delay = config.delay_after(attempt)
                logger.warning(
                    f"Attempt {attempt}/{config.max_attempts} to reach agent "
                    f"{agent_id or 'unknown'} failed: {e}. Resending in {delay:.2f}s"
                )
                await asyncio.sleep(delay)
                attempt += 1
                continue

            if attempt > 1:
                logger.info(f"Agent {agent_id or 'unknown'} reached on attempt {attempt}")
            return result
