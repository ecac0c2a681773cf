# Expression lifecycle record
"""Expression record owned by the expression store"""
from typing import Optional
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .status import ExpressionStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Expression(BaseModel):
    """
    A submitted expression and its lifecycle

    result is set only when completed; error and error_code only when failed.
    """
    id: str
    raw_text: str
    status: ExpressionStatus = ExpressionStatus.PENDING
    result: Optional[float] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    agent_id: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
