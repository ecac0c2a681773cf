"""Shared test helpers: fake agents and dispatcher wiring"""
import json
import time
from typing import Callable, List, Optional

import httpx

from evaluator import evaluate
from execution.core import AgentClient, AgentRegistry, Dispatcher
from execution.models import Agent
from execution.safety import RetryConfig, RetryStrategy, TimeoutHandler
from memory.store import InMemoryExpressionStore


def make_agents(count: int) -> List[Agent]:
    return [Agent(id=f"agent-{i}", address=f"10.0.0.{i}:8081") for i in range(1, count + 1)]


def evaluating_handler(request: httpx.Request) -> httpx.Response:
    """Fake agent that evaluates the task locally"""
    task = json.loads(request.content)
    outcome = evaluate(task["expression"])
    if outcome.success:
        return httpx.Response(200, json={"id": task["id"], "result": outcome.value})
    return httpx.Response(400, json={"id": task["id"], "error": outcome.error.to_dict()})


def make_dispatcher(
    handler: Callable,
    agents: Optional[List[Agent]] = None,
    timeout_seconds: float = 5.0,
    retry_config: Optional[RetryConfig] = None,
) -> Dispatcher:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Dispatcher(
        store=InMemoryExpressionStore(),
        registry=AgentRegistry(make_agents(1) if agents is None else agents),
        client=AgentClient(http_client=http_client),
        timeout_handler=TimeoutHandler(timeout_seconds),
        retry_strategy=RetryStrategy(retry_config) if retry_config else None,
    )


def wait_for_terminal(client, expression_id: str, timeout: float = 5.0) -> dict:
    """Poll GET /status until the expression is completed or failed"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        body = client.get("/status", params={"task_id": expression_id}).json()
        if body["status"] in ("completed", "failed"):
            return body
        time.sleep(0.02)
    raise AssertionError(f"expression {expression_id} never reached a terminal state")


