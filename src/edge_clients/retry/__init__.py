"""
Edge Clients - Retry Logic.

Bounded exponential backoff with jitter and allow-list error classification.
"""

from .config import RetryConfig, RetryObserver
from .backoff import (
    base_delay,
    calculate_backoff,
    is_retryable,
    execute_with_retry,
    with_retry,
    async_with_retry,
)

__all__ = [
    "RetryConfig",
    "RetryObserver",
    "base_delay",
    "calculate_backoff",
    "is_retryable",
    "execute_with_retry",
    "with_retry",
    "async_with_retry",
]
