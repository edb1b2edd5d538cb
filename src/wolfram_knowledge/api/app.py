from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wolfram_knowledge.api.dependencies import HandlerDep, lifespan
from wolfram_knowledge.dto import (
    ActionRequest,
    ActionResult,
    ClearResponse,
    ConversationRequest,
    HealthCheckResponse,
    QuickAnswerRequest,
    StatsResponse,
)
from wolfram_knowledge.services import WolframService

API_NAME = "Wolfram Knowledge API"
API_VERSION = "0.1.0"


def create_app(service: WolframService | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Pre-built service to serve. If None, one is created from the
            environment at startup.

    Returns:
        The configured application.
    """
    app = FastAPI(
        title=API_NAME,
        description="Wolfram|Alpha computational knowledge actions for conversational agents",
        version=API_VERSION,
        lifespan=lifespan,
    )
    if service is not None:
        app.state.wolfram_service = service

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": API_NAME,
            "version": API_VERSION,
            "endpoints": {
                "actions": "/actions",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.get("/stats", response_model=StatsResponse)
    async def stats(handler: HandlerDep) -> StatsResponse:
        """Cache size, active conversations and effective settings."""
        return await handler.get_stats()

    @app.post("/actions/query", response_model=ActionResult)
    async def query(request: ActionRequest, handler: HandlerDep) -> ActionResult:
        """Full query, rendered as text."""
        return await handler.query(request)

    @app.post("/actions/compute", response_model=ActionResult)
    async def compute(request: ActionRequest, handler: HandlerDep) -> ActionResult:
        """Evaluate a mathematical expression."""
        return await handler.compute(request)

    @app.post("/actions/solve", response_model=ActionResult)
    async def solve(request: ActionRequest, handler: HandlerDep) -> ActionResult:
        """Solve an equation."""
        return await handler.solve(request)

    @app.post("/actions/steps", response_model=ActionResult)
    async def steps(request: ActionRequest, handler: HandlerDep) -> ActionResult:
        """Step-by-step solution of a problem."""
        return await handler.steps(request)

    @app.post("/actions/facts", response_model=ActionResult)
    async def facts(request: ActionRequest, handler: HandlerDep) -> ActionResult:
        """Facts about a topic."""
        return await handler.facts(request)

    @app.post("/actions/analyze", response_model=ActionResult)
    async def analyze(request: ActionRequest, handler: HandlerDep) -> ActionResult:
        """Statistical analysis of a dataset."""
        return await handler.analyze(request)

    @app.post("/actions/quick-answer", response_model=ActionResult)
    async def quick_answer(request: QuickAnswerRequest, handler: HandlerDep) -> ActionResult:
        """One-line or spoken answer."""
        return await handler.quick_answer(request)

    @app.post("/actions/conversation", response_model=ActionResult)
    async def conversation(request: ConversationRequest, handler: HandlerDep) -> ActionResult:
        """Conversational turn that keeps context per user."""
        return await handler.conversation(request)

    @app.delete("/conversations/{user_id}", response_model=ClearResponse)
    async def clear_conversation(user_id: str, handler: HandlerDep) -> ClearResponse:
        """Forget one user's conversation thread."""
        return await handler.clear_conversation(user_id)

    @app.delete("/cache", response_model=ClearResponse)
    async def clear_cache(handler: HandlerDep) -> ClearResponse:
        """Clear cached results and every conversation thread."""
        return await handler.clear_cache()

    return app


def main() -> None:
    """Run the API under uvicorn using the API_* settings."""
    import uvicorn

    from wolfram_knowledge.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "wolfram_knowledge.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
