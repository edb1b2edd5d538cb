"""HTTP handlers for Wolfram actions.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling,
and shape every answer as an action-chaining result for the agent host.
"""

import time
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import HTTPException, status

from wolfram_knowledge.dto import (
    ActionRequest,
    ActionResult,
    ClearResponse,
    ConversationRequest,
    HealthCheckResponse,
    QuickAnswerRequest,
    StatsResponse,
)
from wolfram_knowledge.exceptions import InvalidQueryError, WolframAPIError
from wolfram_knowledge.repositories import normalize_input
from wolfram_knowledge.services import WolframService, formatter
from wolfram_knowledge.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

SOURCE = "Wolfram Alpha"


class ActionHandler:
    """HTTP handlers for Wolfram actions.

    This handler delegates business logic to WolframService and handles
    HTTP-specific concerns:
    - Unusable input -> 422
    - Remote failures -> 502
    - Semantic misses -> 200 with ``success`` false

    Example:
        ```python
        service = WolframService.create()
        handler = ActionHandler(service=service)

        @app.post("/actions/query", response_model=ActionResult)
        async def query(request: ActionRequest):
            return await handler.query(request)
        ```
    """

    def __init__(self, service: WolframService) -> None:
        """Initialize the action handler.

        Args:
            service: The Wolfram service for business logic (required).
        """
        self._service = service

    async def _call(self, action: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except InvalidQueryError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(e),
            ) from e
        except WolframAPIError as e:
            logger.error("%s failed: %s", action, e)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to {action}: {e}",
            ) from e

    async def query(self, request: ActionRequest) -> ActionResult:
        """Handle POST /actions/query requests."""
        result = await self._call("query Wolfram Alpha", self._service.query(request.input, request.options))
        text = self._service.format_result(result)
        return ActionResult(
            success=result.success,
            text=text,
            values={"lastQuery": request.input, "queryTime": time.time()},
            data={
                "actionName": "WOLFRAM_QUERY",
                "query": request.input,
                "numpods": result.numpods,
                "source": SOURCE,
            },
            error=None if result.success else formatter.NO_RESULTS,
        )

    async def compute(self, request: ActionRequest) -> ActionResult:
        """Handle POST /actions/compute requests."""
        answer = await self._call("compute", self._service.compute(request.input))
        success = answer != formatter.COULD_NOT_COMPUTE
        return ActionResult(
            success=success,
            text=f"{request.input} = {answer}" if success else answer,
            values={"lastComputation": request.input, "lastResult": answer},
            data={
                "actionName": "WOLFRAM_COMPUTE",
                "expression": request.input,
                "result": answer,
                "source": SOURCE,
            },
            error=None if success else answer,
        )

    async def solve(self, request: ActionRequest) -> ActionResult:
        """Handle POST /actions/solve requests."""
        solution = await self._call("solve equation", self._service.solve_math(request.input))
        success = solution not in (formatter.NO_SOLUTION, formatter.COULD_NOT_SOLVE)
        return ActionResult(
            success=success,
            text=f"**Solution:** {solution}" if success else solution,
            values={"lastEquation": request.input, "lastSolution": solution},
            data={
                "actionName": "WOLFRAM_SOLVE",
                "equation": request.input,
                "solution": solution,
                "source": SOURCE,
            },
            error=None if success else solution,
        )

    async def steps(self, request: ActionRequest) -> ActionResult:
        """Handle POST /actions/steps requests."""
        steps = await self._call("get step-by-step solution", self._service.get_step_by_step(request.input))
        success = steps not in ([formatter.NO_STEPS], [formatter.COULD_NOT_STEP])
        return ActionResult(
            success=success,
            text=formatter.format_steps(request.input, steps),
            values={"lastProblem": request.input, "stepsCount": len(steps) if success else 0},
            data={
                "actionName": "WOLFRAM_STEP_BY_STEP",
                "problem": request.input,
                "steps": steps,
                "source": SOURCE,
            },
            error=None if success else steps[0],
        )

    async def facts(self, request: ActionRequest) -> ActionResult:
        """Handle POST /actions/facts requests.

        Only the first ``max_results`` facts are shown.
        """
        facts = await self._call("get facts", self._service.get_facts(request.input))
        success = facts != [formatter.no_facts_message(normalize_input(request.input))]
        shown = facts[: self._service.settings.max_results]
        text = "\n\n".join(shown)
        return ActionResult(
            success=success,
            text=text,
            values={"lastFactsTopic": request.input, "factsCount": len(shown) if success else 0},
            data={
                "actionName": "WOLFRAM_GET_FACTS",
                "topic": request.input,
                "facts": shown,
                "totalFacts": len(facts) if success else 0,
                "source": SOURCE,
            },
            error=None if success else text,
        )

    async def analyze(self, request: ActionRequest) -> ActionResult:
        """Handle POST /actions/analyze requests."""
        analysis = await self._call("analyze data", self._service.analyze_data(request.input))
        return ActionResult(
            success=analysis.error is None,
            text=formatter.format_analysis(analysis),
            values={"lastDataset": request.input[:100]},
            data={
                "actionName": "WOLFRAM_ANALYZE_DATA",
                "analysis": analysis.model_dump(),
                "source": SOURCE,
            },
            error=analysis.error,
        )

    async def quick_answer(self, request: QuickAnswerRequest) -> ActionResult:
        """Handle POST /actions/quick-answer requests."""
        if request.spoken:
            spoken = await self._call("get spoken answer", self._service.get_spoken_answer(request.input))
            answer, success, error = spoken.spoken, spoken.success, spoken.error
        else:
            short = await self._call("get short answer", self._service.get_short_answer(request.input))
            answer, success, error = short.answer, short.success, short.error

        if not success or not answer:
            message = "I couldn't find a quick answer to that question."
            return ActionResult(
                success=False,
                text=message,
                data={"actionName": "WOLFRAM_QUICK_ANSWER", "question": request.input},
                error=error or message,
            )

        return ActionResult(
            success=True,
            text=answer,
            values={"lastQuickQuestion": request.input, "lastQuickAnswer": answer},
            data={
                "actionName": "WOLFRAM_QUICK_ANSWER",
                "question": request.input,
                "answer": answer,
                "spoken": request.spoken,
                "source": SOURCE,
            },
        )

    async def conversation(self, request: ConversationRequest) -> ActionResult:
        """Handle POST /actions/conversation requests."""
        result = await self._call(
            "process conversational query",
            self._service.conversational_query(request.input, request.user_id, request.max_chars),
        )

        if result.error:
            return ActionResult(
                success=False,
                text=f"Conversation error: {result.error}",
                data={"actionName": "WOLFRAM_CONVERSATIONAL", "query": request.input},
                error=result.error,
            )

        response = result.result or "I couldn't generate a response for that question."
        return ActionResult(
            success=True,
            text=response,
            values={
                "lastConversationQuery": request.input,
                "conversationID": result.conversation_id,
            },
            data={
                "actionName": "WOLFRAM_CONVERSATIONAL",
                "query": request.input,
                "response": response,
                "conversationID": result.conversation_id,
                "source": f"{SOURCE} Conversational",
            },
        )

    async def clear_conversation(self, user_id: str) -> ClearResponse:
        """Handle DELETE /conversations/{user_id} requests."""
        removed = self._service.clear_conversation(user_id)
        return ClearResponse(
            success=removed,
            message="Conversation cleared" if removed else "No active conversation",
        )

    async def clear_cache(self) -> ClearResponse:
        """Handle DELETE /cache requests."""
        self._service.clear_cache()
        return ClearResponse(success=True, message="Cache cleared successfully")

    async def get_stats(self) -> StatsResponse:
        """Handle GET /stats requests."""
        stats = self._service.get_stats()
        return StatsResponse(**stats.model_dump())

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        configured = bool(self._service.settings.app_id)
        return HealthCheckResponse(
            status="healthy" if configured else "unhealthy",
            configured=configured,
        )

