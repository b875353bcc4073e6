"""
AI gateway client adapter.

The gateway exposes an OpenAI-compatible chat completions API in front of
several model providers.
"""

import logging

import httpx

from .base import BaseAIClient
from ..exceptions import (
    AuthenticationError,
    ConnectionError,
    InvalidRequestError,
    PaymentRequiredError,
    RateLimitError,
    ResponseFormatError,
    ServerError,
    TimeoutError,
)
from ..retry import RetryConfig, execute_with_retry
from ..settings import DEFAULT_GATEWAY_MODEL, DEFAULT_GATEWAY_URL, EdgeSettings

logger = logging.getLogger(__name__)

GATEWAY_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    initial_delay=1.0,
    retryable_errors=("RateLimitError", "ServerError", "ConnectionError", "TimeoutError"),
)


class AIGatewayClient(BaseAIClient):
    """
    Client for the AI gateway chat completions API.

    Features:
    - Bearer-token authentication
    - Rate limit and 5xx retry with exponential backoff and jitter
    - Distinct errors for exhausted credits (402) and bad keys (401)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_GATEWAY_URL,
        default_model: str = DEFAULT_GATEWAY_MODEL,
        retry_config: RetryConfig | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize AI gateway client.

        Args:
            api_key: Gateway API key
            base_url: Gateway API base URL
            default_model: Default model to use
            retry_config: Retry configuration (default: GATEWAY_RETRY_CONFIG)
            timeout: Request timeout in seconds
        """
        super().__init__(default_model, retry_config or GATEWAY_RETRY_CONFIG, timeout)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: EdgeSettings, **kwargs) -> "AIGatewayClient":
        return cls(
            api_key=settings.require_gateway_key(),
            base_url=settings.gateway_url,
            default_model=settings.gateway_model,
            **kwargs,
        )

    @property
    def provider_name(self) -> str:
        return "AIGateway"

    def _get_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _handle_error(self, status_code: int, response_text: str = "") -> None:
        """Convert HTTP status codes to domain exceptions."""
        if status_code == 401:
            raise AuthenticationError(
                "Invalid API key",
                source=self.provider_name,
                status_code=status_code,
            )
        elif status_code == 402:
            raise PaymentRequiredError(
                "AI credits exhausted",
                source=self.provider_name,
                status_code=status_code,
            )
        elif status_code == 400:
            raise InvalidRequestError(
                f"Invalid request: {response_text}",
                source=self.provider_name,
                status_code=status_code,
            )
        elif status_code == 429:
            raise RateLimitError(
                "Rate limit exceeded",
                source=self.provider_name,
                status_code=status_code,
            )
        elif status_code >= 500:
            raise ServerError(
                f"Server error: {response_text}",
                source=self.provider_name,
                status_code=status_code,
            )

    async def _complete(self, payload: dict) -> str:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self._get_headers(),
                    json=payload,
                )
        except httpx.ConnectError as e:
            raise ConnectionError(
                "Failed to connect to AI gateway",
                source=self.provider_name,
            ) from e
        except httpx.TimeoutException as e:
            raise TimeoutError(
                f"Request timed out after {self.timeout}s",
                source=self.provider_name,
            ) from e
        except httpx.TransportError as e:
            raise ConnectionError(
                f"Connection to AI gateway failed: {e}",
                source=self.provider_name,
            ) from e

        if response.status_code != 200:
            logger.error(
                f"[{self.provider_name}] API error: {response.status_code} {response.text}"
            )
            self._handle_error(response.status_code, response.text)
            response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseFormatError(
                "AI response is not valid JSON", source=self.provider_name
            ) from e
        if not isinstance(data, dict):
            raise ResponseFormatError(
                f"Expected a JSON object, got {type(data).__name__}",
                source=self.provider_name,
            )

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        if not content:
            raise ResponseFormatError("No content in AI response", source=self.provider_name)
        return content

    async def generate(
        self,
        prompt: str,
        system: str | None = None,
        model: str | None = None,
        context: list[dict] | None = None,
        temperature: float = 0.7,
        max_tokens: int = 4000,
    ) -> str:
        """Generate a chat completion with retry."""
        payload = {
            "model": model or self.default_model,
            "messages": self._build_messages(prompt, system, context),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        def on_retry(attempt: int, error: Exception, delay: float) -> None:
            logger.warning(
                f"[{self.provider_name}] {error}, retrying in {delay:.1f}s "
                f"({attempt}/{self.retry_config.max_attempts - 1})"
            )

        config = self.retry_config
        if config.on_retry is None:
            config = config.with_overrides(on_retry=on_retry)

        content = await execute_with_retry(lambda: self._complete(payload), config)
        logger.debug(f"[{self.provider_name}] Response received ({len(content)} chars)")
        return content

    async def health_check(self) -> bool:
        """Check if the gateway is accessible."""
        if not self.api_key:
            logger.warning(f"[{self.provider_name}] API key not configured")
            return False
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(
                    f"{self.base_url}/models",
                    headers=self._get_headers(),
                )
                return response.status_code == 200
        except Exception as e:
            logger.debug(f"[{self.provider_name}] Health check failed: {e}")
            return False
