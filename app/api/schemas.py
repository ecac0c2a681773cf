# Request/response schemas for the coordinator API
"""Coordinator API schemas"""
from typing import List

from pydantic import BaseModel, field_validator

from execution.models import Agent, Expression, ExpressionStatus


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


class ComputeRequest(BaseModel):
    """Expression submission"""
    expr: str

    @field_validator("expr")
    @classmethod
    def expr_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class SubmitResponse(BaseModel):
    """Acknowledgement of an accepted submission"""
    id: str
    status: ExpressionStatus


class ExpressionList(BaseModel):
    expressions: List[Expression]


class RegisterAgentRequest(BaseModel):
    """Agent registration"""
    id: str
    address: str

    @field_validator("id", "address")
    @classmethod
    def field_not_blank(cls, value: str) -> str:
        return _not_blank(value).strip()


class AgentList(BaseModel):
    agents: List[Agent]
