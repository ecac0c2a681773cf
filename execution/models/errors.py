# CoordinatorError hierarchy
"""Error models for the coordinator"""
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Coordinator-side error categories"""
    VALIDATION_ERROR = "ValidationError"
    NOT_FOUND = "NotFound"
    INVALID_TRANSITION = "InvalidTransition"
    NO_AGENTS_AVAILABLE = "NoAgentsAvailable"
    DISPATCH_FAILED = "DispatchFailed"


class CoordinatorError(Exception):
    """Base exception for coordinator errors"""

    default_code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "error_code": self.error_code.value,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ValidationError(CoordinatorError):
    """Malformed or missing request fields"""
    default_code = ErrorCode.VALIDATION_ERROR


class NotFoundError(CoordinatorError):
    """Unknown expression or agent id"""
    default_code = ErrorCode.NOT_FOUND


class InvalidTransitionError(CoordinatorError):
    """Requested status change violates the expression lifecycle"""
    default_code = ErrorCode.INVALID_TRANSITION


class NoAgentsAvailableError(CoordinatorError):
    """Registry has no agents to select from"""
    default_code = ErrorCode.NO_AGENTS_AVAILABLE


class DispatchError(CoordinatorError):
    """Sending a task to an agent failed"""
    default_code = ErrorCode.DISPATCH_FAILED


class AgentUnreachableError(DispatchError):
    """Connection to the agent could not be made or was lost"""
    pass


class MalformedAgentResponseError(DispatchError):
    """Agent answered with an unexpected status or body"""
    pass


class DispatchTimeoutError(DispatchError):
    """Agent did not answer within the dispatch timeout"""
    pass


class ErrorDetail(BaseModel):
    """Structured error carried in HTTP bodies"""
    code: str
    message: str
    position: Optional[int] = None
