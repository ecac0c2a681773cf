# HTTP client for worker agents
"""Sends tasks to agents and decodes their replies"""
from typing import Optional
import logging

import httpx

from execution.models import (
    Agent,
    AgentUnreachableError,
    MalformedAgentResponseError,
    Task,
    TaskResult,
)
from execution.safety import ResponseValidator

logger = logging.getLogger(__name__)


class AgentClient:
    """Thin async wrapper over httpx for an agent's POST /task"""

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        validator: Optional[ResponseValidator] = None,
        request_timeout_seconds: float = 30.0,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=request_timeout_seconds)
        self.validator = validator or ResponseValidator()

    async def send_task(self, agent: Agent, task: Task) -> TaskResult:
        """
        Send one task and wait for the agent's reply

        Args:
            agent: Target agent
            task: Task to evaluate

        Returns:
            TaskResult carrying either a result or the agent's evaluation error

        Raises:
            AgentUnreachableError: On connection or transport failure
            MalformedAgentResponseError: On unexpected status code or body
        """
        try:
            response = await self._client.post(agent.task_url, json=task.model_dump())
        except httpx.TransportError as e:
            raise AgentUnreachableError(
                message=f"Failed to send task {task.id} to agent {agent.id} at {agent.address}: {e}",
                original_error=e,
            ) from e

        if response.status_code not in (200, 400):
            raise MalformedAgentResponseError(
                message=f"Agent {agent.id} returned unexpected status code: {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedAgentResponseError(
                message=f"Agent {agent.id} returned a non-JSON body for task {task.id}",
                original_error=e,
            ) from e

        if response.status_code == 200:
            validation = self.validator.validate_success(body, task.id)
        else:
            validation = self.validator.validate_error(body, task.id)

        if not validation.is_valid:
            raise MalformedAgentResponseError(
                message=f"Agent {agent.id} returned an invalid reply for task {task.id}: "
                f"{'; '.join(validation.errors)}"
            )
        if validation.warnings:
            logger.warning(f"Agent {agent.id} reply warnings: {validation.warnings}")

        return TaskResult.model_validate(body)

    async def close(self):
        """Close the underlying client if this instance created it"""
        if self._owns_client:
            await self._client.aclose()
