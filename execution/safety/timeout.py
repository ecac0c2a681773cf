# Dispatch deadline
"""Bounds how long the coordinator waits for an agent's reply"""
from typing import Awaitable, Callable, Optional, TypeVar
import asyncio
import time

from execution.models import DispatchTimeoutError

T = TypeVar('T')


class TimeoutHandler:
    """
    Applies the coordinator's dispatch timeout

    The deadline covers the whole send, retries included.
    """

    def __init__(self, timeout_seconds: float = 30.0):
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self.timeout_seconds = timeout_seconds

    async def execute_with_timeout(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        agent_id: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ) -> T:
        """
        Await func(*args, **kwargs) under the dispatch deadline

        Args:
            func: Coroutine function performing the send
            agent_id: Agent being waited on, used in the error message
            timeout_seconds: Deadline for this call instead of the configured one

        Raises:
            DispatchTimeoutError: If the deadline passes first
        """
        deadline = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        started = time.monotonic()

        try:
            return await asyncio.wait_for(func(*args, **kwargs), timeout=deadline)
        except asyncio.TimeoutError as e:
            elapsed = time.monotonic() - started
            raise DispatchTimeoutError(
                message=f"Agent {agent_id or 'unknown'} did not respond within "
                f"{deadline}s (elapsed: {elapsed:.2f}s)",
                original_error=e,
            ) from e
