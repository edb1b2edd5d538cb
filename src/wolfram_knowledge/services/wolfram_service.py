"""Wolfram service for core business logic.

This service orchestrates the gateway (remote calls), the result cache and
the conversation tracker, and derives the specialised results (solutions,
steps, facts, statistics) from full query payloads.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar, cast

import httpx

from wolfram_knowledge.config import QUERY_OPTIONS, Settings, get_settings
from wolfram_knowledge.exceptions import ConfigurationError, InvalidQueryError, WolframAPIError
from wolfram_knowledge.models import (
    AnalysisResult,
    ConversationResult,
    QueryResult,
    ServiceStats,
    ShortAnswerResult,
    SimpleAnswerResult,
    SpokenAnswerResult,
)
from wolfram_knowledge.protocols import CacheStore, ConversationStore
from wolfram_knowledge.repositories import (
    InMemoryCacheRepository,
    InMemoryConversationRepository,
    WolframClient,
    build_cache_key,
    normalize_input,
    to_data_url,
)
from wolfram_knowledge.services import formatter
from wolfram_knowledge.utils.logger import get_logger

logger = get_logger(__name__)

CachedValue = (
    QueryResult
    | ShortAnswerResult
    | SpokenAnswerResult
    | SimpleAnswerResult
    | AnalysisResult
    | str
    | list[str]
)

T = TypeVar("T")

STEP_BY_STEP_PODSTATE = "Step-by-step solution"
DEFAULT_MAX_CHARS = 2000


class WolframService:
    """Core Wolfram|Alpha orchestration service.

    This service depends on PROTOCOLS for its stores, not concrete
    implementations, and is constructed explicitly and passed by reference
    to whoever needs it.

    Example:
        ```python
        from wolfram_knowledge.services import WolframService

        service = WolframService.create()
        await service.initialize()

        result = await service.query("population of Tokyo")
        print(service.format_result(result))

        answer = await service.solve_math("x + 3 = 7")  # "x = 4"
        await service.close()
        ```
    """

    def __init__(
        self,
        client: WolframClient,
        cache: CacheStore[CachedValue],
        conversations: ConversationStore,
        settings: Settings,
    ) -> None:
        """Initialize the Wolfram service.

        Args:
            client: Gateway to the remote sub-APIs (required).
            cache: Result cache for successful results (required).
            conversations: Per-user conversation handles (required).
            settings: Validated settings, used for diagnostics.
        """
        self._client = client
        self._cache = cache
        self._conversations = conversations
        self._settings = settings

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "WolframService":
        """Factory method to create WolframService with in-process stores.

        Args:
            settings: Service settings. If None, loaded from the environment.
            http_client: Pre-built HTTP client (tests pass one on a mock transport).

        Returns:
            Configured WolframService instance

        Raises:
            ConfigurationError: If the settings are missing or invalid
        """
        settings = settings or get_settings()
        return cls(
            client=WolframClient.create(settings, http_client=http_client),
            cache=InMemoryCacheRepository(
                ttl=settings.cache_ttl,
                max_entries=settings.cache_max_entries,
            ),
            conversations=InMemoryConversationRepository(),
            settings=settings,
        )

    async def initialize(self, validate_credentials: bool = True) -> None:
        """Prepare the service, optionally checking the credential.

        The check issues one short-answer query for ``2+2``.

        Raises:
            ConfigurationError: If the remote rejects the credential
        """
        logger.info("Initializing Wolfram service (units=%s)", self._settings.units)
        if not validate_credentials:
            return

        try:
            answer = await self._client.fetch_short("2+2")
        except WolframAPIError as e:
            logger.error("Failed to validate Wolfram API key: %s", e)
            raise ConfigurationError("Invalid or missing Wolfram Alpha App ID") from e

        if not answer.strip():
            raise ConfigurationError("Unexpected response while validating the Wolfram Alpha App ID")

        logger.info("Wolfram service initialized")

    @staticmethod
    def _require_input(text: str, what: str = "query") -> str:
        """Reject empty or whitespace-only input before any network call."""
        if not isinstance(text, str):
            raise InvalidQueryError(f"The {what} must be a string")
        cleaned = normalize_input(text)
        if not cleaned:
            raise InvalidQueryError(f"The {what} is empty")
        return cleaned

    async def _cached(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        should_cache: Callable[[T], bool] = lambda _: True,
    ) -> T:
        """Return the cached value for ``key`` or fetch and store it."""
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cast(T, cached)

        logger.debug("Cache miss: %s", key)
        value = await fetch()
        if should_cache(value):
            self._cache.set(key, cast(CachedValue, value))
        return value

    async def query(self, text: str, options: Mapping[str, Any] | None = None) -> QueryResult:
        """Run a full query.

        Args:
            text: Query input
            options: Query parameter overrides (``podstate``, ``units``,
                ``location``, ``scanner``, ``format``)

        Returns:
            The full result. Only successful results are cached.

        Raises:
            InvalidQueryError: If the input is empty or an option is not a
                query parameter
            WolframAPIError: If the remote call fails
        """
        text = self._require_input(text)
        unknown = sorted(set(options or {}) - set(QUERY_OPTIONS))
        if unknown:
            raise InvalidQueryError(f"Unsupported query options: {', '.join(unknown)}")
        key = build_cache_key("query", text, options)

        async def fetch() -> QueryResult:
            logger.info('Querying Wolfram Alpha: "%s"', text)
            result = await self._client.fetch_query(text, options)
            if result.success:
                logger.info("Wolfram query successful with %d pods", result.numpods or len(result.pods))
            else:
                logger.warning('Wolfram query returned no results for: "%s"', text)
            return result

        return await self._cached(key, fetch, should_cache=lambda r: r.success)

    async def get_simple_answer(self, text: str) -> SimpleAnswerResult:
        """Fetch the single-image answer as a base64 data URL."""
        text = self._require_input(text)

        async def fetch() -> SimpleAnswerResult:
            logger.info('Getting simple answer for: "%s"', text)
            content, content_type = await self._client.fetch_simple(text)
            if not content:
                raise WolframAPIError("Simple API returned an empty image")
            return SimpleAnswerResult(image=to_data_url(content, content_type), content_type=content_type)

        return await self._cached(build_cache_key("simple", text), fetch)

    async def get_short_answer(self, text: str) -> ShortAnswerResult:
        """Fetch a one-line answer. Transport failures come back as ``success=False``."""
        text = self._require_input(text)

        async def fetch() -> ShortAnswerResult:
            logger.info('Getting short answer for: "%s"', text)
            try:
                answer = await self._client.fetch_short(text)
            except WolframAPIError as e:
                logger.error("Failed to get short answer: %s", e)
                return ShortAnswerResult(answer="", success=False, error=str(e))
            return ShortAnswerResult(answer=answer.strip(), success=True)

        return await self._cached(build_cache_key("short", text), fetch, should_cache=lambda r: r.success)

    async def get_spoken_answer(self, text: str) -> SpokenAnswerResult:
        """Fetch a spoken sentence. Transport failures come back as ``success=False``."""
        text = self._require_input(text)

        async def fetch() -> SpokenAnswerResult:
            logger.info('Getting spoken answer for: "%s"', text)
            try:
                spoken = await self._client.fetch_spoken(text)
            except WolframAPIError as e:
                logger.error("Failed to get spoken answer: %s", e)
                return SpokenAnswerResult(spoken="", success=False, error=str(e))
            return SpokenAnswerResult(spoken=spoken.strip(), success=True)

        return await self._cached(build_cache_key("spoken", text), fetch, should_cache=lambda r: r.success)

    async def conversational_query(
        self,
        text: str,
        user_id: str,
        max_chars: int = DEFAULT_MAX_CHARS,
    ) -> ConversationResult:
        """Ask the conversational API, continuing the user's thread if one exists.

        If the remote reports the thread as expired, the handle is dropped and
        the question is asked once more without it. Replies are never cached.

        Args:
            text: User utterance
            user_id: Opaque host user id that owns the thread
            max_chars: Upper bound on the reply length

        Returns:
            The conversational reply, which may carry ``error``

        Raises:
            InvalidQueryError: If the utterance or user id is empty
            WolframAPIError: If the remote call fails
        """
        text = self._require_input(text, "question")
        if not user_id:
            raise InvalidQueryError("A user id is required for conversational queries")

        logger.info('Conversational query from user %s: "%s"', user_id, text)

        handle = self._conversations.get_handle(user_id)
        result = await self._client.fetch_conversation(
            text,
            conversation_id=handle.conversation_id if handle else None,
            max_chars=max_chars,
        )

        if result.expired and handle is not None:
            logger.warning("Conversation %s expired for user %s, starting a new one", handle.conversation_id, user_id)
            self._conversations.clear(user_id)
            result = await self._client.fetch_conversation(text, conversation_id=None, max_chars=max_chars)

        if result.conversation_id and not result.expired:
            self._conversations.set_handle(user_id, result.conversation_id)

        return result

    def clear_conversation(self, user_id: str) -> bool:
        """Forget the conversation thread for one user."""
        return self._conversations.clear(user_id)

    async def solve_math(self, equation: str) -> str:
        """Solve an equation via a full ``solve ...`` query.

        Returns:
            The solution text, or a placeholder when none was found
        """
        equation = self._require_input(equation, "equation")
        key = build_cache_key("solve", equation)

        cached = self._cache.get(key)
        if cached is not None:
            return cast(str, cached)

        logger.info('Solving equation: "%s"', equation)
        try:
            result = await self.query(f"solve {equation}")
        except WolframAPIError as e:
            logger.error("Error solving equation: %s", e)
            raise WolframAPIError(f"Failed to solve equation: {e}", status_code=e.status_code) from e

        if not result.success or not result.pods:
            return formatter.COULD_NOT_SOLVE

        solution = formatter.extract_solution(result)
        if solution is None or solution == formatter.NO_SOLUTION:
            return formatter.NO_SOLUTION

        self._cache.set(key, solution)
        return solution

    async def get_step_by_step(self, problem: str) -> list[str]:
        """Step-by-step solution text for a problem."""
        problem = self._require_input(problem, "problem")
        key = build_cache_key("steps", problem)

        cached = self._cache.get(key)
        if cached is not None:
            return cast(list[str], cached)

        logger.info('Getting step-by-step solution for: "%s"', problem)
        try:
            result = await self.query(problem, {"podstate": STEP_BY_STEP_PODSTATE})
        except WolframAPIError as e:
            logger.error("Error getting step-by-step solution: %s", e)
            raise WolframAPIError(f"Failed to get step-by-step solution: {e}", status_code=e.status_code) from e

        if not result.success or not result.pods:
            return [formatter.COULD_NOT_STEP]

        steps = formatter.extract_steps(result)
        if not steps:
            return [formatter.NO_STEPS]

        self._cache.set(key, steps)
        return steps

    async def compute(self, expression: str) -> str:
        """Evaluate an expression: short answer first, full query as fallback."""
        expression = self._require_input(expression, "expression")
        key = build_cache_key("compute", expression)

        cached = self._cache.get(key)
        if cached is not None:
            return cast(str, cached)

        logger.info('Computing: "%s"', expression)
        short = await self.get_short_answer(expression)
        if short.success and short.answer:
            self._cache.set(key, short.answer)
            return short.answer

        try:
            result = await self.query(expression)
        except WolframAPIError as e:
            logger.error("Error computing expression: %s", e)
            raise WolframAPIError(f"Failed to compute: {e}", status_code=e.status_code) from e

        if result.success and result.pods:
            answer = formatter.extract_computed_value(result)
            if answer is not None:
                self._cache.set(key, answer)
                return answer

        return formatter.COULD_NOT_COMPUTE

    async def get_facts(self, topic: str) -> list[str]:
        """Fact sentences about a topic, one per substantial text fragment."""
        topic = self._require_input(topic, "topic")
        key = build_cache_key("facts", topic)

        cached = self._cache.get(key)
        if cached is not None:
            return cast(list[str], cached)

        logger.info('Getting facts about: "%s"', topic)
        try:
            result = await self.query(topic)
        except WolframAPIError as e:
            logger.error("Error getting facts: %s", e)
            raise WolframAPIError(f"Failed to get facts: {e}", status_code=e.status_code) from e

        if not result.success or not result.pods:
            return [formatter.no_facts_message(topic)]

        facts = formatter.extract_facts(result)
        if not facts:
            return [formatter.no_facts_message(topic)]

        self._cache.set(key, facts)
        return facts

    async def analyze_data(self, data: str) -> AnalysisResult:
        """Statistical analysis of a dataset literal such as ``1, 2, 3``."""
        data = self._require_input(data, "dataset")
        key = build_cache_key("analyze", data)

        cached = self._cache.get(key)
        if cached is not None:
            return cast(AnalysisResult, cached)

        logger.info('Analyzing data: "%s"', data[:50])
        try:
            result = await self.query(f"statistics {data}")
        except WolframAPIError as e:
            logger.error("Error analyzing data: %s", e)
            raise WolframAPIError(f"Failed to analyze data: {e}", status_code=e.status_code) from e

        if not result.success or not result.pods:
            return AnalysisResult(input=data, error=formatter.COULD_NOT_ANALYZE)

        analysis = formatter.extract_statistics(data, result)
        if not analysis.results:
            return AnalysisResult(input=data, error=formatter.COULD_NOT_ANALYZE)

        self._cache.set(key, analysis)
        return analysis

    def format_result(self, result: QueryResult) -> str:
        """Render a full query result for display."""
        return formatter.format_result(result)

    def clear_cache(self) -> None:
        """Clear cached results and every conversation handle."""
        self._cache.clear()
        self._conversations.clear_all()
        logger.info("Wolfram cache cleared")

    def get_stats(self) -> ServiceStats:
        """Get service diagnostics.

        Returns:
            Cache size, active conversations and the effective query settings
        """
        return ServiceStats(
            cache_size=self._cache.size,
            active_conversations=self._conversations.count,
            config=self._settings.public_view(),
        )

    async def close(self) -> None:
        """Stop the service: clear state and release the HTTP client."""
        logger.info("Stopping Wolfram service")
        self.clear_cache()
        await self._client.close()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> CacheStore[CachedValue]:
        """Get the underlying cache (for testing)."""
        return self._cache

    @property
    def conversations(self) -> ConversationStore:
        """Get the underlying conversation store (for testing)."""
        return self._conversations

    @property
    def client(self) -> WolframClient:
        """Get the underlying gateway (for testing)."""
        return self._client
