"""
Shared fixtures: a fake Wolfram|Alpha API on httpx.MockTransport.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from wolfram_knowledge.config import Settings
from wolfram_knowledge.services import WolframService

API_ENDPOINT = "https://api.wolframalpha.com/v2"
LLM_ENDPOINT = "https://www.wolframalpha.com/api/v1/llm-api"

Responder = httpx.Response | Callable[[httpx.Request], httpx.Response]


class FakeWolframAPI:
    """Records outbound requests and replays queued responses per route.

    Routes are keyed by the last path segment: ``query``, ``short``,
    ``spoken``, ``simple``, ``llm-api``. The last queued response for a route
    keeps being replayed once the queue is down to one.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, list[Responder]] = {}

    def add(self, route: str, *responses: Responder) -> None:
        self._routes.setdefault(route, []).extend(responses)

    def calls(self, route: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.rsplit("/", 1)[-1] == route]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = request.url.path.rsplit("/", 1)[-1]
        queue = self._routes.get(route)
        if not queue:
            return httpx.Response(404, text=f"no fake route for {route}")
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder):
            return responder(request)
        return responder


class FakeClock:
    """Manually advanced time source in seconds."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def pod(title: str, *texts: str, scanner: str = "", primary: bool = False) -> dict[str, Any]:
    """Build a pod payload with one subpod per text."""
    return {
        "title": title,
        "scanner": scanner,
        "id": title.replace(" ", ""),
        "primary": primary,
        "numsubpods": len(texts),
        "subpods": [{"title": "", "plaintext": text} for text in texts],
    }


def query_response(*pods: dict[str, Any], success: bool = True, **extra: Any) -> httpx.Response:
    """Build a full query API response."""
    payload = {"success": success, "error": False, "numpods": len(pods), "pods": list(pods), **extra}
    return httpx.Response(200, json={"queryresult": payload})


def conversation_response(result: str, conversation_id: str | None = None, **extra: Any) -> httpx.Response:
    body: dict[str, Any] = {"result": result, **extra}
    if conversation_id is not None:
        body["conversationID"] = conversation_id
    return httpx.Response(200, content=json.dumps(body), headers={"content-type": "application/json"})


@pytest.fixture
def settings() -> Settings:
    """Deterministic settings that ignore the surrounding environment."""
    return Settings(
        app_id="test-app-id",
        cloud_api_key=None,
        api_endpoint=API_ENDPOINT,
        llm_api_endpoint=LLM_ENDPOINT,
        output_format="plaintext",
        timeout_ms=10_000,
        units="metric",
        location=None,
        scanners=None,
        max_results=5,
        cache_ttl=3600,
        cache_max_entries=200,
        max_retries=2,
        retry_delay=0.0,
    )


@pytest.fixture
def wolfram_api() -> FakeWolframAPI:
    return FakeWolframAPI()


@pytest.fixture
def http_client(wolfram_api: FakeWolframAPI, settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.MockTransport(wolfram_api),
        base_url=settings.api_endpoint,
        timeout=settings.timeout_seconds,
    )


@pytest.fixture
def service(settings: Settings, http_client: httpx.AsyncClient) -> WolframService:
    return WolframService.create(settings=settings, http_client=http_client)
