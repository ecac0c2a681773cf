# Expression dispatcher (assigns tasks to agents)
"""Main expression dispatcher"""
from functools import partial
from typing import Optional, Dict, Any, Set
import asyncio
import logging

from execution.core.client import AgentClient
from execution.core.registry import AgentRegistry
from execution.models import (
    Agent,
    DispatchError,
    ErrorCode,
    ErrorDetail,
    Expression,
    ExpressionStatus,
    InvalidTransitionError,
    NoAgentsAvailableError,
    NotFoundError,
    Task,
    ValidationError,
)
from execution.safety import RetryStrategy, TimeoutHandler
from memory.store import BaseExpressionStore

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Coordinates between store, registry and agents

    Each submission is sent by a tracked asyncio task. Whatever happens to
    that task (reply, agent error, transport failure, timeout, cancellation)
    it ends in exactly one terminal transition of the expression.
    """

    def __init__(
        self,
        store: BaseExpressionStore,
        registry: AgentRegistry,
        client: AgentClient,
        timeout_handler: Optional[TimeoutHandler] = None,
        retry_strategy: Optional[RetryStrategy] = None,
    ):
        self.store = store
        self.registry = registry
        self.client = client
        self.timeout_handler = timeout_handler or TimeoutHandler()
        self.retry_strategy = retry_strategy or RetryStrategy()

        self._in_flight: Set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def submit(self, raw_text: str) -> Expression:
        """
        Accept an expression for evaluation

        The expression is processing (or failed, when no agent exists) by the
        time this returns; the agent call continues in the background.

        Args:
            raw_text: Expression text as submitted

        Returns:
            Snapshot of the expression after submission

        Raises:
            ValidationError: If raw_text is empty or blank
        """
        if not raw_text or not raw_text.strip():
            raise ValidationError("Expression must not be empty")

        expression = self.store.create(raw_text)

        try:
            agent = self.registry.next_agent()
        except NoAgentsAvailableError as e:
            logger.error(f"Expression {expression.id} not dispatched: {e.message}")
            return self.store.transition(
                expression.id,
                ExpressionStatus.FAILED,
                error=e.message,
                error_code=e.error_code.value,
            )

        processing = self.store.transition(
            expression.id,
            ExpressionStatus.PROCESSING,
            agent_id=agent.id,
        )

        task = Task(id=expression.id, expression=raw_text)
        job = asyncio.create_task(self._dispatch(agent, task), name=f"dispatch-{task.id}")
        self._in_flight.add(job)
        job.add_done_callback(self._in_flight.discard)

        logger.info(f"Dispatched expression {task.id} to agent {agent.id}")
        return processing

    def on_agent_response(
        self,
        task_id: str,
        result: Optional[float] = None,
        agent_error: Optional[ErrorDetail] = None,
    ) -> Optional[Expression]:
        """
        Record the outcome of a task

        Unknown ids and responses for already-terminal expressions are
        logged and dropped.

        Args:
            task_id: Id of the task (and expression)
            result: Value computed by the agent
            agent_error: Error reported by the agent or raised while dispatching

        Returns:
            Updated expression, or None if the response was dropped
        """
        if agent_error is not None:
            new_status = ExpressionStatus.FAILED
            changes: Dict[str, Any] = {
                "error": agent_error.message or agent_error.code,
                "error_code": agent_error.code,
            }
        elif result is not None:
            new_status = ExpressionStatus.COMPLETED
            changes = {"result": result}
        else:
            new_status = ExpressionStatus.FAILED
            changes = {
                "error": "Agent response carried neither a result nor an error",
                "error_code": ErrorCode.DISPATCH_FAILED.value,
            }

        try:
            updated = self.store.transition(task_id, new_status, **changes)
        except NotFoundError:
            logger.warning(f"Dropped response for unknown task {task_id}")
            return None
        except InvalidTransitionError as e:
            logger.warning(f"Dropped response for task {task_id}: {e.message}")
            return None

        if updated.status == ExpressionStatus.COMPLETED:
            logger.info(f"Task {task_id} completed with result: {updated.result}")
        else:
            logger.info(f"Task {task_id} failed [{updated.error_code}]: {updated.error}")
        return updated

    async def _dispatch(self, agent: Agent, task: Task):
        """Send task to agent and reconcile the outcome"""
        send = partial(
            self.retry_strategy.execute,
            self.client.send_task,
            agent,
            task,
            agent_id=agent.id,
        )

        try:
            reply = await self.timeout_handler.execute_with_timeout(send, agent_id=agent.id)

        except DispatchError as e:
            logger.error(f"Dispatch of task {task.id} to agent {agent.id} failed: {e.message}")
            self._record_dispatch_failure(task.id, e.message)
            return

        except asyncio.CancelledError:
            logger.warning(f"Dispatch of task {task.id} cancelled")
            self._record_dispatch_failure(task.id, "Dispatch cancelled before the agent responded")
            raise

        except Exception as e:
            logger.error(f"Dispatch of task {task.id} failed unexpectedly: {e}", exc_info=True)
            self._record_dispatch_failure(task.id, f"Unexpected dispatch error: {e}")
            return

        if reply.success:
            self.on_agent_response(task.id, result=reply.result)
        else:
            self.on_agent_response(task.id, agent_error=reply.error)

    def _record_dispatch_failure(self, task_id: str, message: str):
        self.on_agent_response(
            task_id,
            agent_error=ErrorDetail(code=ErrorCode.DISPATCH_FAILED.value, message=message),
        )

    async def wait_idle(self):
        """Wait until every in-flight dispatch has finished"""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def shutdown(self):
        """Cancel in-flight dispatches and release the agent client"""
        pending = list(self._in_flight)
        for job in pending:
            job.cancel()
        if pending:
            logger.info(f"Cancelling {len(pending)} in-flight dispatch(es)")
            await asyncio.gather(*pending, return_exceptions=True)
        await self.client.close()

    def get_status(self) -> Dict[str, Any]:
        """Get dispatcher status"""
        return {
            "registry": self.registry.get_statistics(),
            "expressions": self.store.get_statistics(),
            "in_flight": self.in_flight,
        }
