"""
Retry utilities with exponential backoff.

Used by the HTTP collaborators to ride out transient network failures before
a pipeline stage gives up on them.
"""

import asyncio
import functools
import random
import time
from typing import Any, Callable, Optional, Type, Union


def _backoff_delay(attempt: int, base_delay: float, max_delay: float,
                   exponential_base: float, jitter: bool) -> float:
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
    exceptions: Union[Type[BaseException], tuple] = Exception,
    logger: Optional[Any] = None
):
    """
    Retry decorator with exponential backoff.

    Works on both plain and ``async def`` functions.

    Args:
        max_attempts: Maximum number of attempts
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        exponential_base: Base for exponential backoff calculation
        jitter: Whether to add random jitter to delays
        exceptions: Exception types to retry on
        logger: structlog logger for retry logging

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable) -> Callable:
        def on_failure(attempt: int, error: BaseException) -> float:
            if attempt == max_attempts:
                if logger:
                    logger.error(
                        f"Function {func.__name__} failed after {max_attempts} attempts",
                        function=func.__name__,
                        attempts=max_attempts,
                        final_exception=str(error),
                    )
                raise error

            delay = _backoff_delay(attempt, base_delay, max_delay, exponential_base, jitter)
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
            return delay

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    time.sleep(on_failure(attempt, e))

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    await asyncio.sleep(on_failure(attempt, e))

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return wrapper

    return decorator

