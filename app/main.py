"""Coordinator service: accepts expressions and dispatches them to agents."""
from contextlib import asynccontextmanager
from typing import Optional
import argparse
import logging

from fastapi import FastAPI
import uvicorn

from app.api import agents, expressions, health
from app.api.errors import install_error_handlers
from app.config import CoordinatorSettings, configure_logging
from execution.core import AgentClient, AgentRegistry, Dispatcher
from execution.safety import RetryConfig, RetryStrategy, TimeoutHandler
from memory.store import InMemoryExpressionStore

logger = logging.getLogger(__name__)


def build_dispatcher(settings: CoordinatorSettings) -> Dispatcher:
    """Wire store, registry and agent client from settings"""
    return Dispatcher(
        store=InMemoryExpressionStore(),
        registry=AgentRegistry(settings.agents),
        client=AgentClient(request_timeout_seconds=settings.dispatch_timeout_seconds),
        timeout_handler=TimeoutHandler(settings.dispatch_timeout_seconds),
        retry_strategy=RetryStrategy(RetryConfig(max_attempts=settings.dispatch_max_attempts)),
    )


def create_app(
    settings: Optional[CoordinatorSettings] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> FastAPI:
    settings = settings or CoordinatorSettings()
    dispatcher = dispatcher or build_dispatcher(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Coordinator started with {len(dispatcher.registry)} static agent(s), "
            f"dispatch timeout {settings.dispatch_timeout_seconds}s"
        )
        yield
        await dispatcher.shutdown()
        logger.info("Coordinator stopped gracefully")

    app = FastAPI(title="Distributed Calculator Coordinator", lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    install_error_handlers(app)
    app.include_router(health.router)
    app.include_router(expressions.router)
    app.include_router(agents.router)

    return app


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the distributed calculator coordinator")
    parser.add_argument("--host", help="Bind address (COORDINATOR_HOST)")
    parser.add_argument("--port", type=int, help="Bind port (COORDINATOR_PORT)")
    parser.add_argument("--log-level", help="Logging level (LOG_LEVEL)")
    args = parser.parse_args(argv)

    settings = CoordinatorSettings.from_env()
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.log_level:
        settings.log_level = args.log_level

    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
