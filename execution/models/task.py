# Task wire models
"""Units of work exchanged between coordinator and agents"""
from typing import Optional

from pydantic import BaseModel

from .errors import ErrorDetail


class Task(BaseModel):
    """Work unit sent to one agent; id is the owning expression's id"""
    id: str
    expression: str


class TaskResult(BaseModel):
    """Agent reply: a result on success, an error on evaluation failure"""
    id: str
    result: Optional[float] = None
    error: Optional[ErrorDetail] = None

    @property
    def success(self) -> bool:
        return self.error is None
