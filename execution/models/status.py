# ExpressionStatus enum
"""Expression lifecycle states and legal transitions"""
from enum import Enum
from typing import Dict, FrozenSet


class ExpressionStatus(str, Enum):
    """Lifecycle status of a submitted expression"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def can_transition_to(self, new_status: "ExpressionStatus") -> bool:
        """Check if moving to new_status respects the lifecycle"""
        return new_status in ALLOWED_TRANSITIONS[self]


TERMINAL_STATUSES: FrozenSet[ExpressionStatus] = frozenset(
    {ExpressionStatus.COMPLETED, ExpressionStatus.FAILED}
)

# pending -> failed covers submissions that never reach an agent
ALLOWED_TRANSITIONS: Dict[ExpressionStatus, FrozenSet[ExpressionStatus]] = {
    ExpressionStatus.PENDING: frozenset(
        {ExpressionStatus.PROCESSING, ExpressionStatus.FAILED}
    ),
    ExpressionStatus.PROCESSING: frozenset(
        {ExpressionStatus.COMPLETED, ExpressionStatus.FAILED}
    ),
    ExpressionStatus.COMPLETED: frozenset(),
    ExpressionStatus.FAILED: frozenset(),
}
