"""
Backoff calculation, error classification and the retry executor.
"""

import asyncio
import functools
import logging
import random
import time
from typing import Awaitable, Callable, ParamSpec, TypeVar

from .config import RetryConfig

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def base_delay(attempt: int, config: RetryConfig) -> float:
    """
    Pre-jitter delay before retry number `attempt`.

    Args:
        attempt: Zero-based retry index (0 is the wait after the first failure)
        config: Retry configuration

    Returns:
        Delay in seconds, capped at config.max_delay
    """
    delay = config.initial_delay * (config.backoff_multiplier**attempt)
    return min(delay, config.max_delay)


def calculate_backoff(attempt: int, config: RetryConfig) -> float:
    """
    Calculate backoff delay for a given attempt.

    Jitter only ever lengthens the wait, so the result lies in
    [base, base * (1 + jitter)].

    Args:
        attempt: Zero-based retry index
        config: Retry configuration

    Returns:
        Delay in seconds with jitter applied
    """
    delay = base_delay(attempt, config)
    if config.jitter > 0:
        delay += delay * config.jitter * random.random()
    return delay


def _categories(error: Exception) -> set[str]:
    categories = {type(error).__name__}
    for attr in ("code", "status_code"):
        value = getattr(error, attr, None)
        if value is not None:
            categories.add(str(value))
    return categories


def is_retryable(error: Exception, config: RetryConfig) -> bool:
    """
    Decide whether `error` deserves another attempt.

    An error that declares `retryable = False` is never retried. Otherwise
    an empty allow-list retries everything, and a non-empty one requires a
    marker to appear in the error text or equal one of its categories
    (class name, `code`, `status_code`).
    """
    if getattr(error, "retryable", None) is False:
        return False
    if not config.retryable_errors:
        return True

    message = str(error)
    categories = _categories(error)
    return any(
        marker in message or marker in categories for marker in config.retryable_errors
    )


def _notify(config: RetryConfig, attempt: int, error: Exception, delay: float) -> None:
    logger.debug(
        f"Retry {attempt}/{config.max_attempts - 1}: {error}, waiting {delay:.2f}s"
    )
    if config.on_retry is None:
        return
    try:
        config.on_retry(attempt, error, delay)
    except Exception as e:
        logger.warning(f"Retry observer raised {type(e).__name__}: {e}")


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
) -> T:
    """
    Run `operation` until it succeeds, fails fatally, or runs out of attempts.

    Args:
        operation: Zero-argument callable returning an awaitable
        config: Retry configuration (default: RetryConfig())

    Returns:
        The result of the first successful attempt

    An empty `retryable_errors` retries every failure except those that
    declare `retryable = False` (authentication, exhausted credits,
    non-idempotent application failures); see is_retryable.

    Raises:
        The exception from the final attempt, or the first non-retryable one.
        Cancellation during an attempt or a backoff wait propagates at once.
    """
    if config is None:
        config = RetryConfig()

    for attempt in range(1, config.max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt >= config.max_attempts:
                logger.debug(f"All {config.max_attempts} attempts exhausted: {e}")
                raise
            if not is_retryable(e, config):
                logger.debug(f"Not retrying {type(e).__name__}: {e}")
                raise
            delay = calculate_backoff(attempt - 1, config)
            _notify(config, attempt, e, delay)
            await asyncio.sleep(delay)

    raise RuntimeError("Retry loop exited unexpectedly")


def with_retry(
    config: RetryConfig | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for synchronous functions with retry logic.

    Uses the same classification and schedule as execute_with_retry,
    sleeping with time.sleep.

    Args:
        config: Retry configuration (default: RetryConfig())

    Returns:
        Decorated function with retry behavior
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(1, config.max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if attempt >= config.max_attempts or not is_retryable(e, config):
                        raise
                    delay = calculate_backoff(attempt - 1, config)
                    _notify(config, attempt, e, delay)
                    time.sleep(delay)

            raise RuntimeError("Retry loop exited unexpectedly")

        return wrapper

    return decorator


def async_with_retry(
    config: RetryConfig | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Decorator for async functions with retry logic.

    Args:
        config: Retry configuration (default: RetryConfig())

    Returns:
        Decorated async function; every call runs through execute_with_retry
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await execute_with_retry(
                functools.partial(func, *args, **kwargs), config
            )

        return wrapper

    return decorator
