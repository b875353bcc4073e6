"""
Base AI client interface.

Defines the common interface for chat-completion clients and the JSON
extraction used on their replies.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..retry import RetryConfig

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class Role(str, Enum):
    """Message roles in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """A single message in a conversation."""

    role: Role
    content: str

    def to_dict(self) -> dict:
        """Convert to dictionary format for API requests."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)


def extract_json(content: str) -> dict[str, Any]:
    """
    Pull the outermost JSON object out of a model reply.

    Models often wrap JSON in prose or code fences. When no object is
    present the raw text is returned under "content"; when one is present
    but does not parse, "parse_error" is set as well.
    """
    match = _JSON_OBJECT.search(content)
    if not match:
        return {"content": content}
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse error, using raw content: {e}")
        return {"content": content, "parse_error": True}
    if not isinstance(parsed, dict):
        return {"content": content}
    return parsed


class BaseAIClient(ABC):
    """
    Abstract base class for AI chat clients.

    Subclasses implement transport; JSON extraction is shared.
    """

    def __init__(
        self,
        default_model: str | None = None,
        retry_config: RetryConfig | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize the client.

        Args:
            default_model: Default model to use if not specified per-request
            retry_config: Retry configuration for failed requests
            timeout: Request timeout in seconds
        """
        self.default_model = default_model
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name for logging."""
        ...

    def _build_messages(
        self,
        prompt: str,
        system: str | None = None,
        context: list[dict] | None = None,
    ) -> list[dict]:
        """
        Build message list from prompt, system message, and context.

        Args:
            prompt: The user prompt
            system: Optional system message
            context: Optional conversation history

        Returns:
            List of message dictionaries
        """
        messages = []

        if system:
            messages.append(Message.system(system).to_dict())

        if context:
            messages.extend(context)

        messages.append(Message.user(prompt).to_dict())

        return messages

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system: str | None = None,
        model: str | None = None,
        context: list[dict] | None = None,
    ) -> str:
        """
        Generate a response.

        Args:
            prompt: The user prompt
            system: Optional system message
            model: Model to use (defaults to client's default_model)
            context: Optional conversation history

        Returns:
            The generated response text
        """
        ...

    async def generate_json(
        self,
        prompt: str,
        system: str | None = None,
        model: str | None = None,
        context: list[dict] | None = None,
    ) -> dict[str, Any]:
        """Generate a response and parse the JSON object inside it."""
        content = await self.generate(prompt, system=system, model=model, context=context)
        return extract_json(content)

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
