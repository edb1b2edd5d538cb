"""Bounded retry for transient Wolfram|Alpha failures.

Only rate limiting (HTTP 429) and server errors (5xx) are retried. Anything
else, including connectivity and decode errors that carry no status, is
raised on the first attempt.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from wolfram_knowledge.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget for one outbound call.

    Attributes:
        max_retries: Additional attempts after the first one
        initial_delay: Seconds to wait before the first retry, doubled after each
    """

    max_retries: int = 2
    initial_delay: float = 0.25


def is_transient(exc: BaseException) -> bool:
    """Return True for responses worth retrying (429 or any 5xx)."""
    if not isinstance(exc, httpx.HTTPStatusError):
        return False
    status = exc.response.status_code
    return status == 429 or 500 <= status < 600


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        "Transient Wolfram API failure (status %s), retry %d in %.2fs",
        status,
        retry_state.attempt_number,
        delay,
    )


async def with_retry(
    call: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``call`` with exponential backoff on transient failures.

    Args:
        call: Zero-argument coroutine factory, invoked once per attempt
        policy: Retry budget. Defaults to 2 retries starting at 250ms.
        sleep: Coroutine used to wait between attempts

    Returns:
        The result of the first successful attempt

    Raises:
        The last error unchanged once the budget is spent, or the first
        non-transient error immediately.
    """
    policy = policy or RetryPolicy()
    retrying = AsyncRetrying(
        retry=retry_if_exception(is_transient),
        wait=wait_exponential(multiplier=policy.initial_delay, min=0),
        stop=stop_after_attempt(policy.max_retries + 1),
        sleep=sleep,
        before_sleep=_log_retry,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await call()
    raise AssertionError("unreachable: tenacity always returns or raises")  # pragma: no cover
