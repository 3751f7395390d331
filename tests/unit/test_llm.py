"""
Unit Tests for the Gemini Client

Credential gating, timeout handling and response parsing. The LangChain
model is patched out; no network calls are made.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from medisense.config import Settings, is_placeholder_credential
from medisense.core.llm import GeminiClient, GeminiConfig, GeminiResponse
from medisense.utils import ExternalServiceError


@pytest.fixture
def gemini_config() -> GeminiConfig:
    return GeminiConfig(api_key="test-key-123", request_timeout_seconds=0.05)


@pytest.fixture
def patched_client(gemini_config):
    """GeminiClient with the LangChain model replaced by a mock."""
    with patch("medisense.core.llm.gemini_client.ChatGoogleGenerativeAI") as llm_cls:
        client = GeminiClient(gemini_config)
        yield client, llm_cls.return_value


class TestCredentials:
    """Tests for credential gating."""

    @pytest.mark.parametrize("value", [None, "", "   ", "MY_GEMINI_API_KEY", "YOUR_API_KEY"])
    def test_placeholders(self, value):
        assert is_placeholder_credential(value)

    def test_real_looking_key(self):
        assert not is_placeholder_credential("AIzaSyExample")

    def test_unavailable_without_key(self):
        with patch("medisense.core.llm.gemini_client.ChatGoogleGenerativeAI") as llm_cls:
            client = GeminiClient(GeminiConfig(api_key=None))

        assert not client.is_available
        llm_cls.assert_not_called()

    def test_unavailable_with_placeholder(self):
        with patch("medisense.core.llm.gemini_client.ChatGoogleGenerativeAI") as llm_cls:
            client = GeminiClient(GeminiConfig(api_key="MY_GEMINI_API_KEY"))

        assert not client.is_available
        llm_cls.assert_not_called()

    def test_available_with_key(self, patched_client):
        client, _ = patched_client
        assert client.is_available

    def test_config_from_settings(self):
        settings = Settings(
            gemini_api_key="abc",
            gemini_model="gemini-2.5-flash",
            explanation_timeout_seconds=3.5,
        )
        config = GeminiConfig.from_settings(settings)

        assert config.api_key == "abc"
        assert config.model == "gemini-2.5-flash"
        assert config.request_timeout_seconds == 3.5
        assert settings.has_gemini_credentials


@pytest.mark.asyncio
class TestGenerate:
    """Tests for generate_async."""

    async def test_unconfigured_raises(self):
        client = GeminiClient(GeminiConfig(api_key=None))
        with pytest.raises(ExternalServiceError):
            await client.generate_async("prompt")

    async def test_success(self, patched_client):
        client, llm = patched_client
        llm.ainvoke = AsyncMock(return_value=SimpleNamespace(
            content="### Recommended Route\n**Alpha**",
            usage_metadata={"input_tokens": 120, "output_tokens": 40},
        ))

        response = await client.generate_async("prompt", system_instruction="be clinical")

        assert isinstance(response, GeminiResponse)
        assert response.text.startswith("### Recommended Route")
        assert response.prompt_tokens == 120
        assert response.completion_tokens == 40

        messages = llm.ainvoke.call_args.args[0]
        assert messages[0].content == "be clinical"
        assert messages[1].content == "prompt"

    async def test_content_blocks_are_joined(self, patched_client):
        client, llm = patched_client
        llm.ainvoke = AsyncMock(return_value=SimpleNamespace(
            content=[{"type": "text", "text": "part one, "}, {"type": "text", "text": "part two"}],
        ))

        response = await client.generate_async("prompt")
        assert response.text == "part one, part two"

    async def test_error_is_wrapped(self, patched_client):
        client, llm = patched_client
        llm.ainvoke = AsyncMock(side_effect=ConnectionError("network down"))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.generate_async("prompt")

        assert exc_info.value.details["reason"] == "ConnectionError"
        assert client.get_stats()["failure_count"] == 1

    async def test_timeout(self, patched_client):
        client, llm = patched_client

        async def slow_call(messages):
            await asyncio.sleep(1)

        llm.ainvoke = slow_call

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.generate_async("prompt")

        assert exc_info.value.details["reason"] == "timeout"

    async def test_empty_response(self, patched_client):
        client, llm = patched_client
        llm.ainvoke = AsyncMock(return_value=SimpleNamespace(content="   "))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.generate_async("prompt")

        assert exc_info.value.details["reason"] == "empty_response"

    async def test_stats(self, patched_client):
        client, llm = patched_client
        llm.ainvoke = AsyncMock(return_value=SimpleNamespace(content="ok"))
        await client.generate_async("prompt")

        stats = client.get_stats()
        assert stats["is_available"] is True
        assert stats["request_count"] == 1
        assert stats["failure_count"] == 0
        assert stats["last_request"] is not None
