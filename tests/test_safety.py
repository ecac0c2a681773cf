import asyncio

import httpx
import pytest

from execution.core import AgentClient
from execution.models import (
    Agent,
    AgentUnreachableError,
    DispatchTimeoutError,
    MalformedAgentResponseError,
    Task,
)
from execution.safety import ResponseValidator, RetryConfig, RetryStrategy, TimeoutHandler

AGENT = Agent(id="agent-1", address="10.0.0.1:8081")
TASK = Task(id="t1", expression="1+1")


def _no_delay(max_attempts):
    return RetryStrategy(RetryConfig(max_attempts=max_attempts, initial_delay_seconds=0, jitter=False))


def test_retry_config_requires_an_attempt():
    with pytest.raises(ValueError):
        RetryConfig(max_attempts=0)


def test_retries_only_retryable_errors():
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise AgentUnreachableError("down")
        return "ok"

    assert asyncio.run(_no_delay(3).execute(flaky, agent_id="agent-1")) == "ok"
    assert len(calls) == 3


def test_non_retryable_error_propagates_immediately():
    calls = []

    async def broken():
        calls.append(1)
        raise MalformedAgentResponseError("bad body")

    with pytest.raises(MalformedAgentResponseError):
        asyncio.run(_no_delay(3).execute(broken))
    assert len(calls) == 1


def test_single_attempt_by_default():
    calls = []

    async def down():
        calls.append(1)
        raise AgentUnreachableError("down")

    with pytest.raises(AgentUnreachableError):
        asyncio.run(RetryStrategy().execute(down))
    assert len(calls) == 1


def test_timeout_handler():
    handler = TimeoutHandler(0.05)

    async def sleepy():
        await asyncio.sleep(1)

    with pytest.raises(DispatchTimeoutError) as exc_info:
        asyncio.run(handler.execute_with_timeout(sleepy, agent_id="slow-agent"))
    assert "slow-agent did not respond within 0.05s" in exc_info.value.message


def test_zero_timeout_override_is_not_ignored():
    handler = TimeoutHandler(5.0)

    async def sleepy():
        await asyncio.sleep(1)

    with pytest.raises(DispatchTimeoutError) as exc_info:
        asyncio.run(handler.execute_with_timeout(sleepy, timeout_seconds=0))
    assert "within 0s" in exc_info.value.message


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        TimeoutHandler(0)


def test_backoff_grows_and_is_capped():
    config = RetryConfig(initial_delay_seconds=1.0, max_delay_seconds=3.0, jitter=False)

    assert [config.delay_after(n) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]


def test_validator_checks_id_and_shape():
    validator = ResponseValidator()

    assert validator.validate_success({"id": "t1", "result": 2}, "t1").is_valid
    assert not validator.validate_success({"id": "t2", "result": 2}, "t1").is_valid
    assert not validator.validate_success({"id": "t1", "result": "2"}, "t1").is_valid
    assert not validator.validate_error({"id": "t1", "error": {"message": "x"}}, "t1").is_valid

    extra = validator.validate_success({"id": "t1", "result": 2, "agent": "a"}, "t1")
    assert extra.is_valid
    assert extra.warnings


def test_reply_cannot_carry_both_result_and_error():
    validator = ResponseValidator()
    error = {"code": "DivisionByZero", "message": "division by zero"}

    assert not validator.validate_success({"id": "t1", "result": 2, "error": error}, "t1").is_valid
    assert not validator.validate_error({"id": "t1", "result": 2, "error": error}, "t1").is_valid
    assert validator.validate_error({"id": "t1", "result": None, "error": error}, "t1").is_valid


def _send(handler):
    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            return await AgentClient(http_client=http_client).send_task(AGENT, TASK)

    return asyncio.run(scenario())


def test_client_decodes_success_and_error_replies():
    ok = _send(lambda request: httpx.Response(200, json={"id": "t1", "result": 2.0}))
    assert ok.success and ok.result == 2.0

    failed = _send(
        lambda request: httpx.Response(
            400, json={"id": "t1", "error": {"code": "DivisionByZero", "message": "division by zero"}}
        )
    )
    assert not failed.success
    assert failed.error.code == "DivisionByZero"


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(500, json={"detail": "boom"}),
        lambda request: httpx.Response(200, text="not json"),
        lambda request: httpx.Response(200, json={"id": "other", "result": 1}),
        lambda request: httpx.Response(
            200, json={"id": "t1", "result": 1, "error": {"code": "SyntaxError", "message": "x"}}
        ),
    ],
)
def test_client_rejects_malformed_replies(handler):
    with pytest.raises(MalformedAgentResponseError):
        _send(handler)


def test_client_maps_transport_errors():
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(AgentUnreachableError):
        _send(refuse)
