# Coordinator data models
"""Coordinator models"""
from .status import ExpressionStatus, TERMINAL_STATUSES, ALLOWED_TRANSITIONS
from .errors import (
    ErrorCode,
    CoordinatorError,
    ValidationError,
    NotFoundError,
    InvalidTransitionError,
    NoAgentsAvailableError,
    DispatchError,
    AgentUnreachableError,
    MalformedAgentResponseError,
    DispatchTimeoutError,
    ErrorDetail,
)
from .agent import Agent
from .expression import Expression
from .task import Task, TaskResult

__all__ = [
    # Status
    "ExpressionStatus",
    "TERMINAL_STATUSES",
    "ALLOWED_TRANSITIONS",
    # Errors
    "ErrorCode",
    "CoordinatorError",
    "ValidationError",
    "NotFoundError",
    "InvalidTransitionError",
    "NoAgentsAvailableError",
    "DispatchError",
    "AgentUnreachableError",
    "MalformedAgentResponseError",
    "DispatchTimeoutError",
    "ErrorDetail",
    # Records
    "Agent",
    "Expression",
    "Task",
    "TaskResult",
]
