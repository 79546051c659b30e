"""Retry policies for reads from the case and configuration stores.

Only transport failures (connection refused, timeouts, ...) are retried.
Validation errors and HTTP error responses propagate on the first attempt.
"""

import logging
from typing import Callable, TypeVar

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    RetryCallState,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _log_retry_attempt(retry_state: RetryCallState) -> None:
    """Log each retry with the failing call and its exception."""
    logger.warning(
        f"[Resilience] Retry attempt {retry_state.attempt_number} for "
        f"{retry_state.fn.__name__} after {retry_state.seconds_since_start:.1f}s. "
        f"Exception: {retry_state.outcome.exception() if retry_state.outcome else 'Unknown'}"
    )


def create_custom_retry(
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 4,
    multiplier: float = 0.5,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Create a retry decorator for store reads with specific parameters.

    Args:
        max_attempts: Maximum number of attempts, including the first one
        min_wait: Minimum wait time between retries (seconds)
        max_wait: Maximum wait time between retries (seconds)
        multiplier: Exponential backoff multiplier

    Returns:
        A retry decorator retrying on httpx transport errors only

    Example:
        ```python
        read_retry = create_custom_retry(max_attempts=5)

        @read_retry
        async def fetch_configuration():
            ...
        ```
    """
    return retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
        before_sleep=_log_retry_attempt,
        reraise=True,
    )
