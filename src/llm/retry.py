# src/llm/retry.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .errors import TransientGenerationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (TransientGenerationError,),
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Awaits ``operation`` until it succeeds, retrying on ``retry_on`` errors.

    Makes at most ``max_retries + 1`` attempts, waiting
    ``base_delay * 2**attempt`` seconds after failed attempt ``attempt``
    (1s, 2s, 4s with the defaults). Exceptions outside ``retry_on`` propagate
    immediately; the last retryable error propagates once attempts run out.

    Args:
        operation: Zero-argument coroutine function, called once per attempt.
        max_retries: Number of retries after the first attempt.
        base_delay: Delay in seconds before the first retry.
        retry_on: Exception types that trigger a retry.
        sleep: Awaitable sleep, injectable for tests.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    retrying = AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=base_delay, exp_base=2),
        retry=retry_if_exception_type(retry_on),
        before_sleep=before_sleep_log(logger, logging.INFO),
        reraise=True,
    )
    try:
        return await retrying(operation)
    except retry_on as e:
        attempts = retrying.statistics.get("attempt_number", max_retries + 1)
        logger.warning(f"Operation failed after {attempts} attempts: {e}")
        raise
