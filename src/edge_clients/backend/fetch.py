"""
Validated-fetch invocation: retry a data read until it yields data.
"""

from typing import Any, Awaitable, Callable

from .results import BackendResult
from ..exceptions import NoDataError, as_exception
from ..retry import RetryConfig, execute_with_retry

FETCH_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    initial_delay=0.5,
    retryable_errors=(
        "ECONNRESET",
        "ETIMEDOUT",
        "Connection reset",
        "timeout",
        "timed out",
        "Failed to fetch",
        "NetworkError",
        "ConnectionError",
        "TimeoutError",
        # PostgREST: could not connect / connection pool exhausted
        "PGRST000",
        "PGRST001",
        "PGRST002",
        "PGRST003",
        "No data returned",
    ),
)


async def fetch_with_retry(
    fetcher: Callable[[], Awaitable[Any]],
    **overrides: Any,
) -> Any:
    """
    Run a `(data, error)` style fetch with retry.

    Args:
        fetcher: Zero-argument async callable returning a `{data, error}` envelope
        **overrides: RetryConfig fields merged over FETCH_RETRY_CONFIG

    Returns:
        The `data` of the first successful attempt

    Raises:
        The envelope error (as an exception) or NoDataError from the last attempt
    """
    config = FETCH_RETRY_CONFIG.with_overrides(**overrides)

    async def attempt() -> Any:
        result = BackendResult.coerce(await fetcher())
        if result.error is not None:
            raise as_exception(result.error)
        if result.data is None:
            raise NoDataError()
        return result.data

    return await execute_with_retry(attempt, config)
