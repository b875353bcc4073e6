"""
Base exception classes for edge client operations.

Each exception carries a `retryable` flag. `False` means the failure must
never be retried; `True` and `None` leave the decision to the retry
configuration's allow-list.
"""

from typing import Any, Mapping


class EdgeClientError(Exception):
    """Base exception for all edge client errors."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool | None = None,
        status_code: int | None = None,
        code: str | None = None,
        source: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable
        self.status_code = status_code
        self.code = code
        self.source = source

    def __str__(self) -> str:
        parts = [self.message]
        if self.source:
            parts.insert(0, f"[{self.source}]")
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.code:
            parts.append(f"(code: {self.code})")
        return " ".join(parts)


class ConnectionError(EdgeClientError):
    """Raised when the remote service cannot be reached. Usually retryable."""

    def __init__(self, message: str = "Connection failed", **kwargs):
        super().__init__(message, retryable=True, **kwargs)


class TimeoutError(EdgeClientError):
    """Raised when a request times out. Usually retryable."""

    def __init__(self, message: str = "Request timed out", **kwargs):
        super().__init__(message, retryable=True, **kwargs)


class RateLimitError(EdgeClientError):
    """Raised when rate limit is exceeded. Always retryable."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: float | None = None,
        **kwargs,
    ):
        super().__init__(message, retryable=True, **kwargs)
        self.retry_after = retry_after


class ServerError(EdgeClientError):
    """Raised when the server returns a 5xx error. Usually retryable."""

    def __init__(self, message: str = "Server error", **kwargs):
        super().__init__(message, retryable=True, **kwargs)


class AuthenticationError(EdgeClientError):
    """Raised when authentication fails. Not retryable."""

    def __init__(self, message: str = "Authentication failed", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class PaymentRequiredError(EdgeClientError):
    """Raised when the AI gateway has run out of credits. Not retryable."""

    def __init__(self, message: str = "Payment required", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class InvalidRequestError(EdgeClientError):
    """Raised when the request is malformed. Not retryable."""

    def __init__(self, message: str = "Invalid request", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class ConfigurationError(EdgeClientError):
    """Raised when required settings are missing or invalid."""

    def __init__(self, message: str = "Invalid configuration", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class ResponseFormatError(EdgeClientError):
    """Raised when a response arrives but lacks the expected content."""

    def __init__(self, message: str = "Unexpected response format", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class BackendError(EdgeClientError):
    """Error reported inside a `{data, error}` envelope."""

    def __init__(self, message: str = "Request failed", *, details: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.details = details


class NoDataError(BackendError):
    """The backend answered without error but returned no data."""

    def __init__(self, message: str = "No data returned", **kwargs):
        super().__init__(message, **kwargs)


class ApplicationError(BackendError):
    """The call succeeded at transport level but reported `success: false`."""

    def __init__(self, message: str = "Operation failed", **kwargs):
        super().__init__(message, **kwargs)


def as_exception(error: Any, source: str | None = None) -> Exception:
    """
    Convert the `error` half of a `{data, error}` envelope to an exception.

    Exceptions pass through untouched so the caller sees the original
    object. Mappings are read the way PostgREST and the functions runtime
    shape their error bodies.
    """
    if isinstance(error, Exception):
        return error

    if isinstance(error, Mapping):
        status = error.get("status") or error.get("status_code")
        code = error.get("code")
        return BackendError(
            str(error.get("message") or error.get("error") or "Request failed"),
            code=str(code) if code is not None else None,
            status_code=int(status) if str(status).isdigit() else None,
            details=error.get("details"),
            source=source,
        )

    return BackendError(str(error), source=source)
