"""
Tests for WolframService against a fake Wolfram|Alpha API.
"""

import httpx
import pytest
from conftest import conversation_response, pod, query_response

from wolfram_knowledge.exceptions import ConfigurationError, InvalidQueryError, WolframAPIError
from wolfram_knowledge.models import AnalysisResult, QueryResult
from wolfram_knowledge.services import formatter
from wolfram_knowledge.services.wolfram_service import STEP_BY_STEP_PODSTATE


class TestQuery:
    async def test_repeated_query_hits_cache(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Result", "4")))

        first = await service.query("2+2")
        second = await service.query("  2+2 ")

        assert first == second
        assert len(wolfram_api.calls("query")) == 1
        assert service.cache.size == 1

    async def test_unsuccessful_result_is_not_cached(self, service, wolfram_api):
        wolfram_api.add("query", query_response(success=False))

        await service.query("asdfghjkl")
        result = await service.query("asdfghjkl")

        assert result.success is False
        assert len(wolfram_api.calls("query")) == 2
        assert service.cache.size == 0

    async def test_options_change_the_key(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Result", "4")))

        await service.query("pi")
        await service.query("pi", {"podstate": "More digits"})

        assert len(wolfram_api.calls("query")) == 2
        assert wolfram_api.calls("query")[1].url.params["podstate"] == "More digits"

    @pytest.mark.parametrize("option", ["input", "appid", "text", "output"])
    async def test_unsupported_option_is_rejected_before_network(self, service, wolfram_api, option):
        with pytest.raises(InvalidQueryError, match=option):
            await service.query("2+2", {option: "population of Mars"})

        assert wolfram_api.requests == []

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_empty_input_is_rejected_before_network(self, service, wolfram_api, text):
        with pytest.raises(InvalidQueryError):
            await service.query(text)

        assert wolfram_api.requests == []

    async def test_remote_failure_propagates(self, service, wolfram_api):
        wolfram_api.add("query", httpx.Response(403))

        with pytest.raises(WolframAPIError) as exc_info:
            await service.query("pi")

        assert exc_info.value.status_code == 403
        assert service.cache.size == 0

    def test_format_result(self, service):
        result = QueryResult.model_validate({"success": True, "pods": [pod("Result", "4")]})
        assert service.format_result(result) == "**Result**\n4"


class TestSolveMath:
    async def test_solves_and_caches(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Input", "solve x + 3 = 7"), pod("Solution", "x = 4")))

        assert await service.solve_math("x + 3 = 7") == "x = 4"
        assert wolfram_api.calls("query")[0].url.params["input"] == "solve x + 3 = 7"
        assert "solve:x + 3 = 7" in service.cache

        # Served from the solve entry without another call
        assert await service.solve_math("x + 3 = 7") == "x = 4"
        assert len(wolfram_api.calls("query")) == 1

    async def test_no_solution_pod(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Input", "solve x = x + 1"), pod("Plot", "graph")))

        assert await service.solve_math("x = x + 1") == formatter.NO_SOLUTION
        assert "solve:x = x + 1" not in service.cache

    async def test_unsuccessful_query(self, service, wolfram_api):
        wolfram_api.add("query", query_response(success=False))

        assert await service.solve_math("qwerty") == formatter.COULD_NOT_SOLVE

    async def test_remote_failure_names_operation(self, service, wolfram_api):
        wolfram_api.add("query", httpx.Response(401))

        with pytest.raises(WolframAPIError, match="Failed to solve equation") as exc_info:
            await service.solve_math("x + 3 = 7")

        assert exc_info.value.status_code == 401

    async def test_empty_equation(self, service):
        with pytest.raises(InvalidQueryError, match="equation"):
            await service.solve_math(" ")


class TestStepByStep:
    async def test_requests_step_podstate(self, service, wolfram_api):
        wolfram_api.add(
            "query",
            query_response(pod("Input", "x^2 = 4"), pod("Possible intermediate steps", "Take square roots", "x = ±2")),
        )

        steps = await service.get_step_by_step("x^2 = 4")

        assert steps == ["Take square roots", "x = ±2"]
        assert wolfram_api.calls("query")[0].url.params["podstate"] == STEP_BY_STEP_PODSTATE
        assert "steps:x^2 = 4" in service.cache

    async def test_unsuccessful(self, service, wolfram_api):
        wolfram_api.add("query", query_response(success=False))

        assert await service.get_step_by_step("nonsense") == [formatter.COULD_NOT_STEP]


class TestCompute:
    async def test_short_answer_first(self, service, wolfram_api):
        wolfram_api.add("short", httpx.Response(200, text="4"))

        assert await service.compute("2+2") == "4"
        assert wolfram_api.calls("query") == []
        assert "compute:2+2" in service.cache

    async def test_falls_back_to_full_query(self, service, wolfram_api):
        wolfram_api.add("short", httpx.Response(400, text="did not understand"))
        wolfram_api.add("query", query_response(pod("Input", "sqrt(2)"), pod("Decimal approximation", "1.41421")))

        assert await service.compute("sqrt(2)") == "1.41421"
        assert len(wolfram_api.calls("short")) == 1
        assert len(wolfram_api.calls("query")) == 1

    async def test_nothing_computable(self, service, wolfram_api):
        wolfram_api.add("short", httpx.Response(400))
        wolfram_api.add("query", query_response(pod("Plot", "graph")))

        assert await service.compute("plot sin(x)") == formatter.COULD_NOT_COMPUTE
        assert "compute:plot sin(x)" not in service.cache


class TestFacts:
    async def test_returns_every_fact(self, service, wolfram_api):
        wolfram_api.add(
            "query",
            query_response(
                pod("Basic information", "full name: Albert Einstein", "date of birth: March 14, 1879"),
                pod("Image", "photo"),
                pod("Notable facts", "Developed the theory of relativity"),
            ),
        )

        facts = await service.get_facts("Albert Einstein")

        assert facts == [
            "Basic information: full name: Albert Einstein",
            "Basic information: date of birth: March 14, 1879",
            "Notable facts: Developed the theory of relativity",
        ]
        assert "facts:Albert Einstein" in service.cache

    async def test_no_facts(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Image", "photo")))

        assert await service.get_facts("Zorblax") == [formatter.no_facts_message("Zorblax")]
        assert service.cache.size == 1  # only the full query


class TestAnalyze:
    async def test_statistics(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Input", "statistics 1, 2, 3"), pod("Mean", "2")))

        analysis = await service.analyze_data("1, 2, 3")

        assert wolfram_api.calls("query")[0].url.params["input"] == "statistics 1, 2, 3"
        assert analysis.input == "1, 2, 3"
        assert analysis.results["Mean"] == ["2"]
        assert analysis.error is None

    async def test_unsuccessful(self, service, wolfram_api):
        wolfram_api.add("query", query_response(success=False))

        assert await service.analyze_data("a, b") == AnalysisResult(input="a, b", error=formatter.COULD_NOT_ANALYZE)


class TestQuickAnswers:
    async def test_short_answer(self, service, wolfram_api):
        wolfram_api.add("short", httpx.Response(200, text="  Paris \n"))

        result = await service.get_short_answer("capital of France")

        assert result.success is True
        assert result.answer == "Paris"

    async def test_short_failure_is_reported_and_not_cached(self, service, wolfram_api):
        wolfram_api.add("short", httpx.Response(404))

        first = await service.get_short_answer("capital of Atlantis")
        await service.get_short_answer("capital of Atlantis")

        assert first.success is False
        assert "404" in first.error
        assert len(wolfram_api.calls("short")) == 2

    async def test_spoken_answer(self, service, wolfram_api):
        wolfram_api.add("spoken", httpx.Response(200, text="The capital of France is Paris"))

        result = await service.get_spoken_answer("capital of France")

        assert result.spoken == "The capital of France is Paris"
        await service.get_spoken_answer("capital of France")
        assert len(wolfram_api.calls("spoken")) == 1

    async def test_simple_answer(self, service, wolfram_api):
        wolfram_api.add("simple", httpx.Response(200, content=b"GIF89a", headers={"content-type": "image/gif"}))

        result = await service.get_simple_answer("pi")

        assert result.content_type == "image/gif"
        assert result.image.startswith("data:image/gif;base64,")

    async def test_empty_simple_answer_raises(self, service, wolfram_api):
        wolfram_api.add("simple", httpx.Response(200, content=b""))

        with pytest.raises(WolframAPIError):
            await service.get_simple_answer("pi")


class TestConversation:
    async def test_thread_is_continued(self, service, wolfram_api):
        wolfram_api.add(
            "llm-api",
            conversation_response("Paris is the capital of France", conversation_id="conv-123"),
            conversation_response("About 2.1 million people", conversation_id="conv-123"),
        )

        first = await service.conversational_query("What is the capital of France?", "user-1")
        second = await service.conversational_query("What is its population?", "user-1")

        calls = wolfram_api.calls("llm-api")
        assert first.conversation_id == "conv-123"
        assert second.result == "About 2.1 million people"
        assert "conversationID" not in calls[0].url.params
        assert calls[1].url.params["conversationID"] == "conv-123"
        assert calls[1].url.params["maxchars"] == "2000"

    async def test_replies_are_not_cached(self, service, wolfram_api):
        wolfram_api.add("llm-api", conversation_response("Hi", conversation_id="conv-1"))

        await service.conversational_query("hello", "user-1")
        await service.conversational_query("hello", "user-1")

        assert len(wolfram_api.calls("llm-api")) == 2
        assert service.cache.size == 0

    async def test_clear_starts_new_thread(self, service, wolfram_api):
        wolfram_api.add("llm-api", conversation_response("Hi", conversation_id="conv-123"))

        await service.conversational_query("hello", "user-1")
        assert service.clear_conversation("user-1") is True
        await service.conversational_query("hello again", "user-1")

        assert "conversationID" not in wolfram_api.calls("llm-api")[1].url.params
        assert service.clear_conversation("user-2") is False

    async def test_expired_thread_is_restarted_once(self, service, wolfram_api):
        service.conversations.set_handle("user-1", "conv-old")
        wolfram_api.add(
            "llm-api",
            conversation_response("", conversation_id="conv-old", expired=True),
            conversation_response("Fresh answer", conversation_id="conv-new"),
        )

        result = await service.conversational_query("still there?", "user-1")

        calls = wolfram_api.calls("llm-api")
        assert len(calls) == 2
        assert calls[0].url.params["conversationID"] == "conv-old"
        assert "conversationID" not in calls[1].url.params
        assert result.result == "Fresh answer"
        assert service.conversations.get_handle("user-1").conversation_id == "conv-new"

    async def test_restart_happens_only_once(self, service, wolfram_api):
        service.conversations.set_handle("user-1", "conv-old")
        wolfram_api.add("llm-api", conversation_response("", conversation_id="conv-old", expired=True))

        result = await service.conversational_query("still there?", "user-1")

        calls = wolfram_api.calls("llm-api")
        assert len(calls) == 2
        assert "conversationID" not in calls[1].url.params
        assert result.expired is True
        assert service.conversations.get_handle("user-1") is None

    async def test_expired_without_thread_is_not_retried(self, service, wolfram_api):
        wolfram_api.add("llm-api", conversation_response("", expired=True))

        result = await service.conversational_query("hello", "user-1")

        assert result.expired is True
        assert len(wolfram_api.calls("llm-api")) == 1
        assert service.conversations.get_handle("user-1") is None

    async def test_users_are_isolated(self, service, wolfram_api):
        wolfram_api.add(
            "llm-api",
            conversation_response("a", conversation_id="conv-1"),
            conversation_response("b", conversation_id="conv-2"),
        )

        await service.conversational_query("hello", "user-1")
        await service.conversational_query("hello", "user-2")

        assert service.conversations.get_handle("user-1").conversation_id == "conv-1"
        assert service.conversations.get_handle("user-2").conversation_id == "conv-2"

    async def test_user_id_required(self, service, wolfram_api):
        with pytest.raises(InvalidQueryError):
            await service.conversational_query("hello", "")

        assert wolfram_api.requests == []


class TestLifecycle:
    async def test_initialize_validates_credential(self, service, wolfram_api):
        wolfram_api.add("short", httpx.Response(200, text="4"))

        await service.initialize()

        assert wolfram_api.calls("short")[0].url.params["input"] == "2+2"

    async def test_initialize_rejects_bad_credential(self, service, wolfram_api):
        wolfram_api.add("short", httpx.Response(403, text="Invalid appid"))

        with pytest.raises(ConfigurationError):
            await service.initialize()

    async def test_initialize_can_skip_validation(self, service, wolfram_api):
        await service.initialize(validate_credentials=False)

        assert wolfram_api.requests == []

    async def test_stats_and_clear(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Result", "4")))
        wolfram_api.add("llm-api", conversation_response("Hi", conversation_id="conv-1"))

        await service.query("2+2")
        await service.conversational_query("hello", "user-1")

        stats = service.get_stats()
        assert stats.cache_size == 1
        assert stats.active_conversations == 1
        assert stats.config == {"units": "metric", "location": None, "max_results": 5}

        service.clear_cache()

        stats = service.get_stats()
        assert stats.cache_size == 0
        assert stats.active_conversations == 0

    async def test_close_clears_state(self, service, wolfram_api):
        wolfram_api.add("query", query_response(pod("Result", "4")))
        await service.query("2+2")

        await service.close()

        assert service.cache.size == 0
