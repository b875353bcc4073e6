"""
Remote-procedure invocation: call a named edge function with retry.

A `success: false` body is an application-level failure. Retrying it can
repeat side effects, so it is only retried for calls declared idempotent.
"""

import logging
from typing import Any, Awaitable, Callable, Mapping

from .results import BackendResult
from ..exceptions import ApplicationError, NoDataError, as_exception
from ..retry import RetryConfig, execute_with_retry

logger = logging.getLogger(__name__)

Invoker = Callable[[str, Any], Awaitable[Any]]

RPC_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    initial_delay=1.0,
    retryable_errors=(
        "Failed to fetch",
        "NetworkError",
        "network",
        "ECONNRESET",
        "Connection reset",
        "ConnectionError",
        "TimeoutError",
        "rate limit",
        "Rate limit",
        "RateLimitError",
        "429",
        "503",
        "504",
    ),
)


async def invoke_with_retry(
    invoker: Invoker,
    function_name: str,
    body: Any = None,
    *,
    idempotent: bool = False,
    **overrides: Any,
) -> Any:
    """
    Invoke `function_name` through `invoker` with retry.

    Args:
        invoker: Async callable(function_name, body) returning a `{data, error}` envelope
        function_name: Name of the remote procedure
        body: JSON-serialisable request body
        idempotent: Allow retrying `success: false` responses
        **overrides: RetryConfig fields merged over RPC_RETRY_CONFIG

    Returns:
        The response `data` of the first successful attempt
    """
    config = RPC_RETRY_CONFIG.with_overrides(**overrides)

    async def attempt() -> Any:
        result = BackendResult.coerce(await invoker(function_name, body))
        if result.error is not None:
            raise as_exception(result.error, source=function_name)
        if result.data is None:
            raise NoDataError(source=function_name)

        data = result.data
        if isinstance(data, Mapping) and data.get("success") is False:
            message = data.get("error") or "Operation failed"
            raise ApplicationError(
                str(message),
                retryable=None if idempotent else False,
                source=function_name,
            )
        return data

    logger.debug(f"[{function_name}] Invoking (idempotent={idempotent})")
    return await execute_with_retry(attempt, config)
