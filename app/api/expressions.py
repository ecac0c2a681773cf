"""Expression submission and polling endpoints"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.dependencies import get_dispatcher
from app.api.schemas import ComputeRequest, ExpressionList, SubmitResponse
from execution.core import Dispatcher
from execution.models import Expression

logger = logging.getLogger(__name__)

router = APIRouter(tags=["expressions"])


def _load(dispatcher: Dispatcher, task_id: Optional[str]) -> Expression:
    if not task_id:
        raise HTTPException(status_code=400, detail="Task ID is required")
    expression = dispatcher.store.get(task_id)
    if expression is None:
        raise HTTPException(status_code=404, detail="Expression not found")
    return expression


@router.post("/compute", status_code=202, response_model=SubmitResponse)
@router.post("/expressions", status_code=202, response_model=SubmitResponse)
async def submit_expression(
    body: ComputeRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    expression = await dispatcher.submit(body.expr)
    return SubmitResponse(id=expression.id, status=expression.status)


@router.get("/expressions", response_model=ExpressionList)
def list_expressions(dispatcher: Dispatcher = Depends(get_dispatcher)):
    expressions = dispatcher.store.list()
    logger.debug(f"Listed all expressions: count={len(expressions)}")
    return ExpressionList(expressions=expressions)


@router.get("/expressions/{expression_id}", response_model=Expression)
def get_expression(expression_id: str, dispatcher: Dispatcher = Depends(get_dispatcher)):
    return _load(dispatcher, expression_id)


@router.get("/status", response_model=Expression)
def get_status(
    task_id: Optional[str] = Query(None),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    return _load(dispatcher, task_id)


@router.get("/result", response_model=Expression)
def get_result(
    task_id: Optional[str] = Query(None),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    expression = _load(dispatcher, task_id)
    if not expression.is_terminal:
        raise HTTPException(status_code=400, detail="Task is not completed yet")
    return expression
