# expression store
"""Expression store implementations for lifecycle records."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from datetime import datetime, timezone
import logging
import threading
import uuid

from execution.models import (
    Expression,
    ExpressionStatus,
    InvalidTransitionError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class BaseExpressionStore(ABC):
    """Abstract base class for expression storage backends."""

    @abstractmethod
    def create(self, raw_text: str) -> Expression:
        """Create a pending expression with a fresh id."""
        pass

    @abstractmethod
    def get(self, expression_id: str) -> Optional[Expression]:
        """Get a snapshot of one expression."""
        pass

    @abstractmethod
    def list(self) -> List[Expression]:
        """Snapshot of all expressions."""
        pass

    @abstractmethod
    def transition(
        self,
        expression_id: str,
        new_status: ExpressionStatus,
        result: Optional[float] = None,
        error: Optional[str] = None,
        error_code: Optional[str] = None,
        agent_id: Optional[str] = None,
    ) -> Expression:
        """Atomically move an expression to a new status."""
        pass

    @abstractmethod
    def get_statistics(self) -> Dict[str, int]:
        """Count expressions by status."""
        pass


class InMemoryExpressionStore(BaseExpressionStore):
    """
    In-memory storage guarded by a single lock.
    Records live for the lifetime of the process.
    """

    def __init__(self):
        self._expressions: Dict[str, Expression] = {}
        self._lock = threading.Lock()

    def create(self, raw_text: str) -> Expression:
        """Create expression in pending state."""
        expression = Expression(id=str(uuid.uuid4()), raw_text=raw_text)
        with self._lock:
            self._expressions[expression.id] = expression
            snapshot = expression.model_copy()

        logger.debug(f"Created expression {expression.id}: {raw_text!r}")
        return snapshot

    def get(self, expression_id: str) -> Optional[Expression]:
        """Get expression snapshot, or None if unknown."""
        with self._lock:
            expression = self._expressions.get(expression_id)
            return expression.model_copy() if expression else None

    def list(self) -> List[Expression]:
        """List snapshots of all expressions."""
        with self._lock:
            return [e.model_copy() for e in self._expressions.values()]

    def transition(
        self,
        expression_id: str,
        new_status: ExpressionStatus,
        result: Optional[float] = None,
        error: Optional[str] = None,
        error_code: Optional[str] = None,
        agent_id: Optional[str] = None,
    ) -> Expression:
        """
        Move expression to new_status

        Args:
            expression_id: Expression to update
            new_status: Target status
            result: Required for completed, forbidden otherwise
            error: Required for failed, forbidden otherwise
            error_code: Error category, only with failed
            agent_id: Agent the expression was assigned to

        Returns:
            Snapshot of the updated expression

        Raises:
            NotFoundError: If expression_id is unknown
            InvalidTransitionError: If the lifecycle or payload invariants are violated
        """
        self._check_payload(new_status, result, error, error_code)

        with self._lock:
            expression = self._expressions.get(expression_id)
            if expression is None:
                raise NotFoundError(f"Expression not found: {expression_id}")

            old_status = expression.status
            if not old_status.can_transition_to(new_status):
                raise InvalidTransitionError(
                    f"Invalid status transition for {expression_id}: "
                    f"{old_status.value} -> {new_status.value}"
                )

            expression.status = new_status
            if new_status == ExpressionStatus.COMPLETED:
                expression.result = result
            elif new_status == ExpressionStatus.FAILED:
                expression.error = error
                expression.error_code = error_code
            if agent_id is not None:
                expression.agent_id = agent_id
            expression.updated_at = datetime.now(timezone.utc)
            snapshot = expression.model_copy()

        logger.debug(
            f"Expression {expression_id} status updated: "
            f"{old_status.value} -> {new_status.value}"
        )
        return snapshot

    @staticmethod
    def _check_payload(
        new_status: ExpressionStatus,
        result: Optional[float],
        error: Optional[str],
        error_code: Optional[str],
    ):
        if new_status == ExpressionStatus.COMPLETED:
            if result is None:
                raise InvalidTransitionError("Completed transition requires a result")
            if error is not None or error_code is not None:
                raise InvalidTransitionError("Completed transition cannot carry an error")
        elif new_status == ExpressionStatus.FAILED:
            if not error:
                raise InvalidTransitionError("Failed transition requires an error")
            if result is not None:
                raise InvalidTransitionError("Failed transition cannot carry a result")
        elif result is not None or error is not None or error_code is not None:
            raise InvalidTransitionError(
                f"{new_status.value} transition cannot carry a result or error"
            )

    def get_statistics(self) -> Dict[str, int]:
        """Count expressions by status."""
        with self._lock:
            counts = {status.value: 0 for status in ExpressionStatus}
            for expression in self._expressions.values():
                counts[expression.status.value] += 1
            counts["total"] = len(self._expressions)
        return counts

    def __len__(self) -> int:
        with self._lock:
            return len(self._expressions)
