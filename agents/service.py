"""Worker agent HTTP service."""

from contextlib import asynccontextmanager
from typing import Optional
import argparse
import asyncio
import logging

from fastapi import FastAPI
from starlette.responses import JSONResponse
import uvicorn

from agents.registration import register_with_coordinator
from app.api.errors import install_error_handlers
from app.config import AgentSettings, configure_logging
from evaluator import evaluate, list_functions
from execution.models import ErrorDetail, Task, TaskResult

logger = logging.getLogger(__name__)


def create_agent_app(settings: Optional[AgentSettings] = None) -> FastAPI:
    settings = settings or AgentSettings()
    # bounds concurrent evaluations
    slots = asyncio.Semaphore(settings.computing_power)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Agent {settings.agent_id} started at {settings.address} "
            f"(computing power {settings.computing_power})"
        )
        if settings.orchestrator_url:
            await register_with_coordinator(settings)
        yield
        logger.info(f"Agent {settings.agent_id} stopped gracefully")

    app = FastAPI(title=f"Distributed Calculator Agent {settings.agent_id}", lifespan=lifespan)
    app.state.settings = settings
    install_error_handlers(app)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "service": "agent",
            "agent_id": settings.agent_id,
            "computing_power": settings.computing_power,
            "functions": list_functions(),
        }

    @app.post("/task")
    async def handle_task(task: Task):
        async with slots:
            outcome = await asyncio.to_thread(evaluate, task.expression)

        if outcome.success:
            logger.info(f"Task {task.id} evaluated: {task.expression!r} = {outcome.value}")
            return {"id": task.id, "result": outcome.value}

        error = ErrorDetail(**outcome.error.to_dict())
        logger.warning(
            f"Failed to evaluate task {task.id} [{error.code}]: {error.message}"
        )
        reply = TaskResult(id=task.id, error=error)
        return JSONResponse(
            status_code=400,
            content=reply.model_dump(mode="json", exclude_none=True),
        )

    return app


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run a distributed calculator agent")
    parser.add_argument("--id", dest="agent_id", help="Agent id (AGENT_ID)")
    parser.add_argument("--host", help="Bind address (AGENT_HOST)")
    parser.add_argument("--port", type=int, help="Bind port (AGENT_PORT)")
    parser.add_argument("--orchestrator-url", help="Coordinator base URL (ORCHESTRATOR_URL)")
    parser.add_argument("--log-level", help="Logging level (LOG_LEVEL)")
    args = parser.parse_args(argv)

    settings = AgentSettings.from_env()
    if args.agent_id:
        settings.agent_id = args.agent_id
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.orchestrator_url:
        settings.orchestrator_url = args.orchestrator_url.rstrip("/")
    if args.log_level:
        settings.log_level = args.log_level

    configure_logging(settings.log_level)
    uvicorn.run(create_agent_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
