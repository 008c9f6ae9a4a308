"""
Retry utilities with exponential backoff.

Used by the screenshot uploader, the only part of the assistant that talks to
the network. Resolution and reconciliation never retry: they are pure.
"""

import asyncio
import functools
import random
import time
from typing import Any, Callable, Optional, Type, Union


def backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
) -> float:
    """Delay before retrying after the given 1-based failed attempt."""
    delay = min(base_delay * (exponential_base ** (attempt - 1)), max_delay)
    if jitter:
        delay *= (0.5 + random.random() * 0.5)
    return delay


def retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: Union[Type[Exception], tuple] = Exception,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    logger: Optional[Any] = None
):
    """
    Retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts, first call included
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        exponential_base: Base for exponential backoff calculation
        jitter: Whether to add random jitter to delays
        exceptions: Exception types to retry on
        should_retry: Optional predicate; errors it rejects are raised at once
        logger: Logger instance for retry logging

    Returns:
        Decorated function with retry logic
    """
    def give_up(func: Callable, attempt: int, error: Exception) -> bool:
        if should_retry is not None and not should_retry(error):
            return True
        if attempt == max_attempts:
            if logger:
                logger.error(
                    f"Function {func.__name__} failed after {max_attempts} attempts",
                    function=func.__name__,
                    attempts=max_attempts,
                    final_exception=str(error),
                )
            return True
        return False

    def announce(func: Callable, attempt: int, delay: float, error: Exception) -> None:
        if logger:
            logger.warning(
                f"Function {func.__name__} failed (attempt {attempt}/{max_attempts}), "
                f"retrying in {delay:.2f}s",
                function=func.__name__,
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                exception=str(error),
            )

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if give_up(func, attempt, e):
                        raise
                    delay = backoff_delay(attempt, base_delay, max_delay, exponential_base, jitter)
                    announce(func, attempt, delay, e)
                    time.sleep(delay)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if give_up(func, attempt, e):
                        raise
                    delay = backoff_delay(attempt, base_delay, max_delay, exponential_base, jitter)
                    announce(func, attempt, delay, e)
                    await asyncio.sleep(delay)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return wrapper

    return decorator


def is_retryable_error(error: Exception) -> bool:
    """
    Determine if an error is retryable.

    Args:
        error: The exception to check

    Returns:
        True if the error is retryable, False otherwise
    """
    retryable_errors = (
        ConnectionError,
        TimeoutError,
        asyncio.TimeoutError,
    )

    if isinstance(error, retryable_errors):
        return True

    status = getattr(error, "status", None)
    if status in (429, 500, 502, 503, 504):
        return True

    error_str = str(error).lower()
    retryable_keywords = [
        'timeout', 'connection refused', 'network unreachable',
        'temporary failure', 'service unavailable', 'rate limit',
        'too many requests', 'server error', 'gateway timeout',
        'cannot connect'
    ]

    return any(keyword in error_str for keyword in retryable_keywords)
