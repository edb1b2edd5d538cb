"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from wolfram_knowledge.handlers import ActionHandler
from wolfram_knowledge.services import WolframService
from wolfram_knowledge.utils.logger import get_logger

logger = get_logger(__name__)


def get_handler(request: Request) -> ActionHandler:
    """Dependency injection for ActionHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ActionHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "action_handler", None)
    if handler is None:
        raise RuntimeError("ActionHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Service (business logic) - app.state.wolfram_service, unless one was
       injected before startup
    2. Handler (HTTP endpoints) - app.state.action_handler

    A service built here validates the credential against the remote API;
    an injected service is used as-is.

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes the service and removes it from app.state on shutdown
    """
    service: WolframService | None = getattr(app.state, "wolfram_service", None)
    if service is None:
        service = WolframService.create()
        await service.initialize(validate_credentials=True)

    app.state.wolfram_service = service
    app.state.action_handler = ActionHandler(service=service)

    stats = service.get_stats()
    logger.info("Wolfram service ready (units=%s, location=%s)", stats.config["units"], stats.config["location"])

    yield

    await service.close()
    del app.state.action_handler
    del app.state.wolfram_service
    logger.info("Wolfram service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ActionHandler, Depends(get_handler)]
