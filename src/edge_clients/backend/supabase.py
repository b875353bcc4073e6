"""
Supabase backend client.

Talks to edge functions and the PostgREST API over httpx. Like the
JavaScript client it stands in for, it reports failures inside a
`{data, error}` envelope instead of raising, so it plugs straight into
fetch_with_retry and invoke_with_retry.
"""

import logging
from typing import Any, Mapping

import httpx

from .fetch import fetch_with_retry
from .results import BackendResult
from .rpc import invoke_with_retry
from ..exceptions import (
    AuthenticationError,
    BackendError,
    ConnectionError,
    EdgeClientError,
    PaymentRequiredError,
    RateLimitError,
    ServerError,
    TimeoutError,
)
from ..settings import EdgeSettings

logger = logging.getLogger(__name__)

SINGLE_OBJECT = "application/vnd.pgrst.object+json"


class SupabaseClient:
    """
    Client for Supabase edge functions and REST tables.

    Features:
    - Edge function invocation returning `{data, error}`
    - Table reads with equality filters
    - Retry helpers for both, via the shared retry executor
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
    ):
        """
        Initialize Supabase client.

        Args:
            url: Project URL
            api_key: Service-role or anon key
            timeout: Request timeout in seconds
        """
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: EdgeSettings) -> "SupabaseClient":
        return cls(
            settings.supabase_url,
            settings.supabase_key,
            timeout=settings.request_timeout,
        )

    @property
    def provider_name(self) -> str:
        return "Supabase"

    def _get_headers(self, accept: str = "application/json") -> dict:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": accept,
        }

    def _error_for_status(self, response: httpx.Response, source: str) -> EdgeClientError:
        """Convert a non-2xx response to a domain exception."""
        status = response.status_code
        payload = _json_or_none(response)
        body = payload if isinstance(payload, Mapping) else {}
        message = str(body.get("message") or body.get("error") or response.text or "Request failed")

        if status in (401, 403):
            return AuthenticationError(message, status_code=status, source=source)
        if status == 402:
            return PaymentRequiredError(message, status_code=status, source=source)
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            return RateLimitError(
                message,
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=status,
                source=source,
            )
        if status >= 500:
            return ServerError(message, status_code=status, source=source)
        code = body.get("code")
        return BackendError(
            message,
            status_code=status,
            code=str(code) if code is not None else None,
            details=body.get("details"),
            source=source,
        )

    async def _send(
        self,
        method: str,
        url: str,
        source: str,
        *,
        accept: str = "application/json",
        **kwargs: Any,
    ) -> BackendResult:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method, url, headers=self._get_headers(accept), **kwargs
                )
        except httpx.ConnectError as e:
            logger.warning(f"[{self.provider_name}] Connection error calling {source}: {e}")
            return BackendResult(error=ConnectionError(f"Failed to connect to {self.url}", source=source))
        except httpx.TimeoutException:
            logger.warning(f"[{self.provider_name}] Timeout calling {source}")
            return BackendResult(
                error=TimeoutError(f"Request timed out after {self.timeout}s", source=source)
            )
        except httpx.TransportError as e:
            logger.warning(f"[{self.provider_name}] Transport error calling {source}: {e}")
            return BackendResult(
                error=ConnectionError(f"Connection to {self.url} failed: {e}", source=source)
            )

        if not response.is_success:
            error = self._error_for_status(response, source)
            logger.warning(f"[{self.provider_name}] {error}")
            return BackendResult(error=error)

        return BackendResult(data=_json_or_none(response))

    async def invoke(self, function_name: str, body: Any = None) -> BackendResult:
        """POST a JSON body to an edge function."""
        return await self._send(
            "POST",
            f"{self.url}/functions/v1/{function_name}",
            function_name,
            json=body if body is not None else {},
        )

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        single: bool = False,
    ) -> BackendResult:
        """
        Read rows from a table.

        Args:
            table: Table or view name
            columns: PostgREST select expression
            filters: Column equality filters
            single: Expect exactly one row and return it as an object

        Returns:
            BackendResult with a list of rows (or one row when single)
        """
        params = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"

        return await self._send(
            "GET",
            f"{self.url}/rest/v1/{table}",
            table,
            accept=SINGLE_OBJECT if single else "application/json",
            params=params,
        )

    async def invoke_with_retry(
        self,
        function_name: str,
        body: Any = None,
        *,
        idempotent: bool = False,
        **overrides: Any,
    ) -> Any:
        """Invoke an edge function, retrying transient failures."""
        return await invoke_with_retry(
            self.invoke, function_name, body, idempotent=idempotent, **overrides
        )

    async def fetch_with_retry(
        self,
        table: str,
        columns: str = "*",
        filters: Mapping[str, Any] | None = None,
        single: bool = False,
        **overrides: Any,
    ) -> Any:
        """Read from a table, retrying transient failures and empty results."""

        async def fetcher() -> BackendResult:
            return await self.select(table, columns, filters, single)

        return await fetch_with_retry(fetcher, **overrides)


def _json_or_none(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
