"""
Edge Clients - Resilient backend and AI gateway access.

Retry with exponential backoff and jitter, plus the clients built on it.
"""

from .backend import (
    BackendResult,
    SupabaseClient,
    fetch_with_retry,
    invoke_with_retry,
)
from .clients import AIGatewayClient, BaseAIClient, Message, Role, extract_json
from .exceptions import (
    EdgeClientError,
    ConnectionError,
    TimeoutError,
    RateLimitError,
    ServerError,
    AuthenticationError,
    PaymentRequiredError,
    InvalidRequestError,
    ConfigurationError,
    ResponseFormatError,
    BackendError,
    NoDataError,
    ApplicationError,
)
from .retry import (
    RetryConfig,
    base_delay,
    calculate_backoff,
    is_retryable,
    execute_with_retry,
    with_retry,
    async_with_retry,
)
from .settings import EdgeSettings

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Settings
    "EdgeSettings",
    # Retry
    "RetryConfig",
    "base_delay",
    "calculate_backoff",
    "is_retryable",
    "execute_with_retry",
    "with_retry",
    "async_with_retry",
    # Backend
    "BackendResult",
    "SupabaseClient",
    "fetch_with_retry",
    "invoke_with_retry",
    # AI clients
    "AIGatewayClient",
    "BaseAIClient",
    "Message",
    "Role",
    "extract_json",
    # Exceptions
    "EdgeClientError",
    "ConnectionError",
    "TimeoutError",
    "RateLimitError",
    "ServerError",
    "AuthenticationError",
    "PaymentRequiredError",
    "InvalidRequestError",
    "ConfigurationError",
    "ResponseFormatError",
    "BackendError",
    "NoDataError",
    "ApplicationError",
]
