"""
Tests for retry on transient Wolfram API failures.
"""

import httpx
import pytest

from wolfram_knowledge.utils import RetryPolicy, is_transient, with_retry

FAST = RetryPolicy(max_retries=2, initial_delay=0.0)


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.wolframalpha.com/v2/query")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class Flaky:
    """Raises the queued errors in order, then returns ``value``."""

    def __init__(self, *errors: BaseException, value: str = "ok") -> None:
        self.errors = list(errors)
        self.value = value
        self.attempts = 0

    async def __call__(self) -> str:
        self.attempts += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


@pytest.mark.parametrize("status", [429, 500, 502, 503, 599])
def test_transient_statuses(status):
    assert is_transient(_status_error(status))


@pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
def test_non_transient_statuses(status):
    assert not is_transient(_status_error(status))


def test_connect_error_is_not_transient():
    assert not is_transient(httpx.ConnectError("boom"))
    assert not is_transient(ValueError("bad json"))


def test_default_policy():
    policy = RetryPolicy()
    assert policy.max_retries == 2
    assert policy.initial_delay == 0.25


async def test_recovers_after_two_server_errors():
    call = Flaky(_status_error(503), _status_error(503))

    assert await with_retry(call, FAST) == "ok"
    assert call.attempts == 3


async def test_rate_limit_is_retried():
    call = Flaky(_status_error(429))

    assert await with_retry(call, FAST) == "ok"
    assert call.attempts == 2


async def test_not_found_is_raised_immediately():
    call = Flaky(_status_error(404))

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await with_retry(call, FAST)

    assert exc_info.value.response.status_code == 404
    assert call.attempts == 1


async def test_exhausted_budget_reraises_last_error():
    call = Flaky(_status_error(500), _status_error(502), _status_error(503))

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await with_retry(call, FAST)

    assert exc_info.value.response.status_code == 503
    assert call.attempts == 3


async def test_connect_error_is_not_retried():
    call = Flaky(httpx.ConnectError("connection refused"))

    with pytest.raises(httpx.ConnectError):
        await with_retry(call, FAST)

    assert call.attempts == 1


async def test_zero_retries_means_single_attempt():
    call = Flaky(_status_error(503))

    with pytest.raises(httpx.HTTPStatusError):
        await with_retry(call, RetryPolicy(max_retries=0, initial_delay=0.0))

    assert call.attempts == 1


class RecordingSleep:
    """Records requested waits instead of sleeping."""

    def __init__(self) -> None:
        self.waits: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


async def test_backoff_doubles_from_initial_delay():
    call = Flaky(_status_error(503), _status_error(503))
    sleep = RecordingSleep()

    assert await with_retry(call, RetryPolicy(), sleep=sleep) == "ok"
    assert sleep.waits == [0.25, 0.5]


async def test_no_wait_without_retry():
    sleep = RecordingSleep()

    with pytest.raises(httpx.HTTPStatusError):
        await with_retry(Flaky(_status_error(404)), RetryPolicy(), sleep=sleep)

    assert sleep.waits == []
