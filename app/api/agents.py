"""Agent registration endpoints"""
from fastapi import APIRouter, Depends

from app.api.dependencies import get_dispatcher
from app.api.schemas import AgentList, RegisterAgentRequest
from execution.core import Dispatcher
from execution.models import Agent

router = APIRouter(prefix="/agents", tags=["agents"])


@router.post("/register", response_model=Agent)
def register_agent(
    body: RegisterAgentRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    return dispatcher.registry.register(Agent(id=body.id, address=body.address))


@router.get("", response_model=AgentList)
def list_agents(dispatcher: Dispatcher = Depends(get_dispatcher)):
    return AgentList(agents=dispatcher.registry.list_all())
