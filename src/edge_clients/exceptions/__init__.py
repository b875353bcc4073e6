"""
Edge Clients - Exception Hierarchy.

Domain exceptions with retry-awareness for backend and AI gateway calls.
"""

from .base import (
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
    as_exception,
)

__all__ = [
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
    "as_exception",
]
