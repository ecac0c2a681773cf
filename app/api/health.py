from fastapi import APIRouter, Depends

from app.api.dependencies import get_dispatcher
from execution.core import Dispatcher

router = APIRouter(tags=["health"])


@router.get("/health")
def health(dispatcher: Dispatcher = Depends(get_dispatcher)):
    return {"status": "ok", "service": "coordinator", **dispatcher.get_status()}
