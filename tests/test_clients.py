"""Tests for AI clients - behavior focused with HTTP mocking."""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from edge_clients.clients import (
    GATEWAY_RETRY_CONFIG,
    AIGatewayClient,
    BaseAIClient,
    Message,
    Role,
    extract_json,
)
from edge_clients.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    PaymentRequiredError,
    RateLimitError,
    ResponseFormatError,
    ServerError,
)
from edge_clients.retry import RetryConfig
from edge_clients.settings import EdgeSettings


# --- Helpers ---


def create_response(status_code: int, json_data: dict | None = None, text: str = "") -> httpx.Response:
    """Create a mock response with a proper request object."""
    request = httpx.Request("POST", "http://test")
    if json_data:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text, request=request)


def completion(content: str | None) -> dict:
    """Create a chat completion body."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def gateway():
    """Gateway client with no retries for predictable tests."""
    return AIGatewayClient(api_key="test-api-key", retry_config=RetryConfig.no_retry())


class ScriptedClient(BaseAIClient):
    """Client that replays a fixed reply."""

    def __init__(self, reply: str):
        super().__init__(default_model="scripted")
        self.reply = reply
        self.prompts = []

    @property
    def provider_name(self) -> str:
        return "Scripted"

    async def generate(self, prompt, system=None, model=None, context=None):
        self.prompts.append((prompt, system))
        return self.reply

    async def health_check(self) -> bool:
        return True


# --- JSON extraction ---


class TestExtractJson:
    """Test JSON extraction from model replies."""

    def test_plain_object(self):
        assert extract_json('{"score": 72}') == {"score": 72}

    def test_object_inside_code_fence(self):
        reply = 'Here is the analysis:\n```json\n{"risk": "low", "factors": ["a"]}\n```'

        assert extract_json(reply) == {"risk": "low", "factors": ["a"]}

    def test_no_object_returns_content(self):
        assert extract_json("No structured data") == {"content": "No structured data"}

    def test_broken_object_flags_parse_error(self):
        reply = 'Result: {"score": 72, trailing }'

        assert extract_json(reply) == {"content": reply, "parse_error": True}


class TestBaseClient:
    """Test shared client behavior."""

    @pytest.mark.asyncio
    async def test_generate_json_parses_reply(self):
        client = ScriptedClient('Result: {"forecast": [1, 2, 3]}')

        result = await client.generate_json("Forecast revenue", system="You are an analyst")

        assert result == {"forecast": [1, 2, 3]}
        assert client.prompts == [("Forecast revenue", "You are an analyst")]

    def test_build_messages_orders_system_context_user(self):
        client = ScriptedClient("")
        history = [Message.assistant("earlier").to_dict()]

        messages = client._build_messages("now", system="sys", context=history)

        assert [m["role"] for m in messages] == ["system", "assistant", "user"]
        assert messages[-1]["content"] == "now"

    def test_message_to_dict(self):
        assert Message(Role.USER, "hi").to_dict() == {"role": "user", "content": "hi"}


# --- Gateway client ---


class TestGatewayGenerate:
    """Test gateway generate behavior."""

    @pytest.mark.asyncio
    async def test_returns_content_on_success(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(200, completion("Hello!"))

            assert await gateway.generate("Hi") == "Hello!"

    @pytest.mark.asyncio
    async def test_sends_model_and_auth_header(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(200, completion("ok"))

            await gateway.generate("Hi", system="Be brief")

            kwargs = mock_post.call_args.kwargs
            assert kwargs["headers"]["Authorization"] == "Bearer test-api-key"
            assert kwargs["json"]["model"] == "google/gemini-2.5-flash"
            assert kwargs["json"]["messages"][0] == {"role": "system", "content": "Be brief"}
            assert mock_post.call_args.args[0] == "https://ai.gateway.lovable.dev/v1/chat/completions"

    @pytest.mark.asyncio
    async def test_uses_provided_model(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(200, completion("ok"))

            await gateway.generate("Hi", model="openai/gpt-5-mini")

            assert mock_post.call_args.kwargs["json"]["model"] == "openai/gpt-5-mini"

    @pytest.mark.asyncio
    async def test_raises_auth_error_on_401(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(401, text="Invalid API key")

            with pytest.raises(AuthenticationError):
                await gateway.generate("Hi")

    @pytest.mark.asyncio
    async def test_raises_payment_required_on_402(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(402, text="Payment required")

            with pytest.raises(PaymentRequiredError):
                await gateway.generate("Hi")

    @pytest.mark.asyncio
    async def test_missing_content_raises(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(200, completion(None))

            with pytest.raises(ResponseFormatError):
                await gateway.generate("Hi")

    @pytest.mark.asyncio
    async def test_non_json_body_raises_format_error(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(200, text="<html>proxy error</html>")

            with pytest.raises(ResponseFormatError):
                await gateway.generate("Hi")

    @pytest.mark.asyncio
    async def test_array_body_raises_format_error(self, gateway):
        request = httpx.Request("POST", "http://test")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(200, json=[{"choices": []}], request=request)

            with pytest.raises(ResponseFormatError):
                await gateway.generate("Hi")

    @pytest.mark.asyncio
    async def test_generate_json(self, gateway):
        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(200, completion('```json\n{"kpis": []}\n```'))

            assert await gateway.generate_json("KPIs") == {"kpis": []}


class TestGatewayRetry:
    """Test gateway retry behavior."""

    def test_default_retry_config(self):
        client = AIGatewayClient(api_key="k")

        assert client.retry_config is GATEWAY_RETRY_CONFIG

    @pytest.mark.asyncio
    async def test_retries_on_rate_limit(self, sleeps):
        """Given 429 then 200, eventually succeeds."""
        client = AIGatewayClient(api_key="k")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = [
                create_response(429, text="Rate limited"),
                create_response(200, completion("Success!")),
            ]

            assert await client.generate("Hi") == "Success!"
            assert mock_post.call_count == 2
            assert len(sleeps) == 1

    @pytest.mark.asyncio
    async def test_server_errors_exhaust_attempts(self, sleeps):
        client = AIGatewayClient(api_key="k")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(500, text="boom")

            with pytest.raises(ServerError):
                await client.generate("Hi")

            assert mock_post.call_count == 3

    @pytest.mark.asyncio
    async def test_connection_error_retried(self, sleeps):
        client = AIGatewayClient(api_key="k")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ConnectError("Connection refused")

            with pytest.raises(ConnectionError):
                await client.generate("Hi")

            assert mock_post.call_count == 3

    @pytest.mark.asyncio
    async def test_server_disconnect_retried_as_connection_error(self, sleeps):
        client = AIGatewayClient(api_key="k")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = [
                httpx.RemoteProtocolError("Server disconnected without sending a response."),
                create_response(200, completion("recovered")),
            ]

            assert await client.generate("Hi") == "recovered"
            assert mock_post.call_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_payment_required(self, sleeps):
        client = AIGatewayClient(api_key="k")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = create_response(402, text="credits")

            with pytest.raises(PaymentRequiredError):
                await client.generate("Hi")

            assert mock_post.call_count == 1
            assert sleeps == []

    @pytest.mark.asyncio
    async def test_custom_observer_is_kept(self, sleeps):
        observed = []
        config = GATEWAY_RETRY_CONFIG.with_overrides(on_retry=lambda *args: observed.append(args))
        client = AIGatewayClient(api_key="k", retry_config=config)

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = [
                create_response(429, text="Rate limited"),
                create_response(200, completion("ok")),
            ]

            await client.generate("Hi")

        assert len(observed) == 1
        assert isinstance(observed[0][1], RateLimitError)


class TestGatewayHealthCheck:
    """Test gateway health check behavior."""

    @pytest.mark.asyncio
    async def test_returns_true_when_up(self, gateway):
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = create_response(200, {"data": []})

            assert await gateway.health_check() is True

    @pytest.mark.asyncio
    async def test_returns_false_when_down(self, gateway):
        with patch.object(httpx.AsyncClient, "get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = httpx.ConnectError("Connection refused")

            assert await gateway.health_check() is False

    @pytest.mark.asyncio
    async def test_returns_false_without_api_key(self):
        assert await AIGatewayClient(api_key="").health_check() is False


class TestGatewaySettings:
    """Test construction from settings."""

    def test_from_settings(self):
        settings = EdgeSettings(
            supabase_url="https://p.supabase.co",
            supabase_key="k",
            gateway_api_key="g",
            gateway_model="openai/gpt-5-mini",
        )

        client = AIGatewayClient.from_settings(settings)

        assert client.api_key == "g"
        assert client.default_model == "openai/gpt-5-mini"

    def test_from_settings_requires_gateway_key(self):
        settings = EdgeSettings(supabase_url="https://p.supabase.co", supabase_key="k")

        with pytest.raises(ConfigurationError):
            AIGatewayClient.from_settings(settings)
