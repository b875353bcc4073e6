"""
Explicit settings for backend and AI gateway clients.

Values are read once (usually from the environment) and passed to the
clients that need them.
"""

import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import ConfigurationError

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_GATEWAY_MODEL = "google/gemini-2.5-flash"


@dataclass(frozen=True)
class EdgeSettings:
    """
    Connection settings for edge clients.

    Attributes:
        supabase_url: Project URL (e.g. https://xyz.supabase.co)
        supabase_key: Service-role or anon key
        gateway_api_key: AI gateway key, optional until a gateway client is built
        gateway_url: AI gateway base URL
        gateway_model: Default chat model
        request_timeout: HTTP timeout in seconds
    """

    supabase_url: str
    supabase_key: str
    gateway_api_key: str | None = None
    gateway_url: str = DEFAULT_GATEWAY_URL
    gateway_model: str = DEFAULT_GATEWAY_MODEL
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.supabase_url:
            raise ConfigurationError("SUPABASE_URL is not configured")
        if not self.supabase_key:
            raise ConfigurationError("Supabase key is not configured")
        if self.request_timeout <= 0:
            raise ConfigurationError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )

    def require_gateway_key(self) -> str:
        if not self.gateway_api_key:
            raise ConfigurationError("LOVABLE_API_KEY is not configured")
        return self.gateway_api_key

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EdgeSettings":
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ

        timeout = env.get("EDGE_REQUEST_TIMEOUT", "30")
        try:
            request_timeout = float(timeout)
        except ValueError as e:
            raise ConfigurationError(f"Invalid EDGE_REQUEST_TIMEOUT: {timeout!r}") from e

        return cls(
            supabase_url=env.get("SUPABASE_URL", ""),
            supabase_key=env.get("SUPABASE_SERVICE_ROLE_KEY") or env.get("SUPABASE_ANON_KEY", ""),
            gateway_api_key=env.get("LOVABLE_API_KEY") or None,
            gateway_url=env.get("AI_GATEWAY_URL") or DEFAULT_GATEWAY_URL,
            gateway_model=env.get("AI_GATEWAY_MODEL") or DEFAULT_GATEWAY_MODEL,
            request_timeout=request_timeout,
        )
