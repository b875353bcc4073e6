"""
Edge Clients - AI Clients.

Chat-completion clients whose replies are parsed as JSON.
"""

from .base import BaseAIClient, Message, Role, extract_json
from .ai_gateway import AIGatewayClient, GATEWAY_RETRY_CONFIG

__all__ = [
    "BaseAIClient",
    "Message",
    "Role",
    "extract_json",
    "AIGatewayClient",
    "GATEWAY_RETRY_CONFIG",
]
