import asyncio
import json

import httpx
import pytest

from agents import create_agent_app
from execution.core import AgentClient, AgentRegistry, Dispatcher
from execution.models import ErrorDetail, ExpressionStatus, ValidationError
from execution.safety import RetryConfig, TimeoutHandler
from helpers import evaluating_handler, make_agents, make_dispatcher
from memory.store import InMemoryExpressionStore


def test_submit_returns_processing_then_completes():
    dispatcher = make_dispatcher(evaluating_handler)

    async def scenario():
        submitted = await dispatcher.submit("2+2")
        await dispatcher.wait_idle()
        return submitted, dispatcher.store.get(submitted.id)

    submitted, final = asyncio.run(scenario())

    assert submitted.status == ExpressionStatus.PROCESSING
    assert submitted.agent_id == "agent-1"
    assert final.status == ExpressionStatus.COMPLETED
    assert final.result == 4.0


def test_processing_is_recorded_before_agent_is_called():
    seen = []

    def handler(request):
        task = json.loads(request.content)
        seen.append(dispatcher.store.get(task["id"]).status)
        return httpx.Response(200, json={"id": task["id"], "result": 1.0})

    dispatcher = make_dispatcher(handler)

    async def scenario():
        await dispatcher.submit("1")
        await dispatcher.wait_idle()

    asyncio.run(scenario())

    assert seen == [ExpressionStatus.PROCESSING]


def test_submissions_rotate_over_agents():
    agents = make_agents(3)
    dispatcher = make_dispatcher(evaluating_handler, agents=agents)

    async def scenario():
        submitted = [await dispatcher.submit(f"{k}+0") for k in range(1, len(agents) + 2)]
        await dispatcher.wait_idle()
        return submitted

    submitted = asyncio.run(scenario())

    assert [e.agent_id for e in submitted] == ["agent-1", "agent-2", "agent-3", "agent-1"]


def test_agent_evaluation_error_is_recorded_with_category():
    dispatcher = make_dispatcher(evaluating_handler)

    async def scenario():
        submitted = await dispatcher.submit("5/0")
        await dispatcher.wait_idle()
        return dispatcher.store.get(submitted.id)

    final = asyncio.run(scenario())

    assert final.status == ExpressionStatus.FAILED
    assert final.error_code == "DivisionByZero"
    assert final.result is None


def test_unreachable_agent_fails_dispatch():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    dispatcher = make_dispatcher(handler)

    async def scenario():
        submitted = await dispatcher.submit("1+1")
        await dispatcher.wait_idle()
        return dispatcher.store.get(submitted.id)

    final = asyncio.run(scenario())

    assert final.status == ExpressionStatus.FAILED
    assert final.error_code == "DispatchFailed"
    assert "connection refused" in final.error


def test_malformed_replies_fail_dispatch():
    replies = iter([
        lambda task: httpx.Response(200, json={"id": task["id"]}),
        lambda task: httpx.Response(500, text="internal error"),
        lambda task: httpx.Response(200, json={"id": "someone-else", "result": 1.0}),
        lambda task: httpx.Response(200, text="not json"),
        lambda task: httpx.Response(400, json={"detail": "Invalid request body"}),
        lambda task: httpx.Response(
            200,
            json={"id": task["id"], "result": 1.0, "error": {"code": "SyntaxError", "message": "x"}},
        ),
    ])

    def handler(request):
        return next(replies)(json.loads(request.content))

    dispatcher = make_dispatcher(handler)

    async def scenario():
        ids = [(await dispatcher.submit("1")).id for _ in range(6)]
        await dispatcher.wait_idle()
        return [dispatcher.store.get(i) for i in ids]

    finals = asyncio.run(scenario())

    assert all(e.status == ExpressionStatus.FAILED for e in finals)
    assert all(e.error_code == "DispatchFailed" for e in finals)


def test_unresponsive_agent_times_out():
    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, json={"id": "late", "result": 1.0})

    dispatcher = make_dispatcher(handler, timeout_seconds=0.05)

    async def scenario():
        submitted = await dispatcher.submit("1+1")
        await dispatcher.wait_idle()
        return dispatcher.store.get(submitted.id)

    final = asyncio.run(scenario())

    assert final.status == ExpressionStatus.FAILED
    assert final.error_code == "DispatchFailed"
    assert "did not respond" in final.error


def test_no_agents_fails_submission():
    dispatcher = make_dispatcher(evaluating_handler, agents=[])

    async def scenario():
        return await dispatcher.submit("1+1")

    submitted = asyncio.run(scenario())

    assert submitted.status == ExpressionStatus.FAILED
    assert submitted.error_code == "NoAgentsAvailable"
    assert dispatcher.in_flight == 0


def test_blank_expression_is_rejected_before_storing():
    dispatcher = make_dispatcher(evaluating_handler)

    with pytest.raises(ValidationError):
        asyncio.run(dispatcher.submit("   "))
    assert len(dispatcher.store) == 0


def test_duplicate_and_unknown_responses_are_dropped():
    dispatcher = make_dispatcher(evaluating_handler)

    async def scenario():
        submitted = await dispatcher.submit("2+2")
        await dispatcher.wait_idle()
        return submitted

    submitted = asyncio.run(scenario())

    duplicate = dispatcher.on_agent_response(
        submitted.id, agent_error=ErrorDetail(code="SyntaxError", message="late")
    )
    unknown = dispatcher.on_agent_response("missing", result=1.0)

    assert duplicate is None
    assert unknown is None
    final = dispatcher.store.get(submitted.id)
    assert final.status == ExpressionStatus.COMPLETED
    assert final.result == 4.0


def test_response_without_result_or_error_fails():
    dispatcher = make_dispatcher(evaluating_handler)
    expression = dispatcher.store.create("1")
    dispatcher.store.transition(expression.id, ExpressionStatus.PROCESSING)

    updated = dispatcher.on_agent_response(expression.id)

    assert updated.status == ExpressionStatus.FAILED
    assert updated.error_code == "DispatchFailed"


def test_retry_is_opt_in():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return evaluating_handler(request)

    dispatcher = make_dispatcher(
        handler,
        retry_config=RetryConfig(max_attempts=2, initial_delay_seconds=0, jitter=False),
    )

    async def scenario():
        submitted = await dispatcher.submit("3*3")
        await dispatcher.wait_idle()
        return dispatcher.store.get(submitted.id)

    final = asyncio.run(scenario())

    assert len(attempts) == 2
    assert final.status == ExpressionStatus.COMPLETED
    assert final.result == 9.0


def test_shutdown_fails_in_flight_dispatches():
    started = []

    async def handler(request):
        started.append(request)
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    dispatcher = make_dispatcher(handler)

    async def scenario():
        submitted = await dispatcher.submit("1+1")
        while not started:
            await asyncio.sleep(0.01)
        await dispatcher.shutdown()
        return dispatcher.store.get(submitted.id)

    final = asyncio.run(scenario())

    assert final.status == ExpressionStatus.FAILED
    assert final.error_code == "DispatchFailed"
    assert "cancelled" in final.error
    assert dispatcher.in_flight == 0


def test_end_to_end_with_in_process_agent():
    agent_app = create_agent_app()
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=agent_app))
    dispatcher = Dispatcher(
        store=InMemoryExpressionStore(),
        registry=AgentRegistry(make_agents(2)),
        client=AgentClient(http_client=http_client),
        timeout_handler=TimeoutHandler(5.0),
    )

    async def scenario():
        ok = await dispatcher.submit("(2+3)*sqrt(9)+cos(0)")
        bad = await dispatcher.submit("unknownfn(1)")
        await dispatcher.wait_idle()
        await http_client.aclose()
        return dispatcher.store.get(ok.id), dispatcher.store.get(bad.id)

    ok, bad = asyncio.run(scenario())

    assert ok.status == ExpressionStatus.COMPLETED
    assert abs(ok.result - 16) < 1e-6
    assert bad.status == ExpressionStatus.FAILED
    assert bad.error_code == "UnknownFunction"


def test_status_summary():
    dispatcher = make_dispatcher(evaluating_handler, agents=make_agents(2))

    status = dispatcher.get_status()

    assert status["registry"]["total_agents"] == 2
    assert status["expressions"]["total"] == 0
    assert status["in_flight"] == 0
