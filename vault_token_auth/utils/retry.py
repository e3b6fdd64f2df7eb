"""Retry utilities for asynchronous transport calls using Tenacity."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import RETRY_BACKOFF_MULTIPLIER, RETRY_MAX_BACKOFF_SECONDS

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    retry_on: tuple[type[BaseException], ...],
    max_attempts: int,
    on_retry: Callable[[int], None] | None = None,
) -> T:
    """Retry an asynchronous operation with exponential backoff using Tenacity.

    Only exceptions listed in ``retry_on`` trigger another attempt; anything
    else propagates immediately. When attempts run out the last exception
    is re-raised unchanged.

    Args:
        operation: Async callable performing one attempt.
        retry_on: Exception types considered transient.
        max_attempts: Maximum number of attempts (1 disables retrying).
        on_retry: Optional callback receiving the number of the attempt about to run.

    Returns:
        The result from operation if successful.
    """

    def before_attempt(retry_state: RetryCallState) -> None:
        if on_retry is not None and retry_state.attempt_number > 1:
            on_retry(retry_state.attempt_number)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(max_attempts, 1)),
        wait=wait_exponential(multiplier=RETRY_BACKOFF_MULTIPLIER, max=RETRY_MAX_BACKOFF_SECONDS),
        retry=retry_if_exception_type(retry_on),
        before=before_attempt,
        reraise=True,
    )
    return await retrying(operation)
