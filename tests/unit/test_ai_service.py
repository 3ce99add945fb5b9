"""Unit tests for the Gemini-backed AIService."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from google.genai import errors as genai_errors

from services.ai_service import AIService, TextGenServiceError
from services.prompts import build_script_instructions
from roast_agent.models import Budget, TextGenerationRequest
from utils.retry import APIRateLimitError, NetworkError, TemporaryServiceError


def _client(result=None, error=None) -> Mock:
    client = Mock()
    client.aio.models.generate_content = AsyncMock(return_value=result, side_effect=error)
    return client


def _api_error(cls, code: int):
    return cls(code, {"error": {"code": code, "message": "provider says no", "status": "ERROR"}})


@pytest.fixture
def instructions(sample_request):
    return build_script_instructions(sample_request, Budget(words_per_second=3.0, max_words=36))


class TestGenerateJson:
    """Tests for AIService.generate_json()."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_text_and_sends_contract(self, instructions):
        client = _client(SimpleNamespace(text='{"lines": ["a"], "caption": "b"}'))
        service = AIService(api_key="test_key", model_name="gemini-test", client=client)

        text = await service.generate_json(instructions)

        assert text == '{"lines": ["a"], "caption": "b"}'
        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == instructions.user
        config = kwargs["config"]
        assert config.system_instruction == instructions.system
        assert config.response_mime_type == "application/json"
        assert config.temperature == instructions.temperature

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_response_is_empty_string(self, instructions):
        service = AIService(api_key="k", client=_client(SimpleNamespace(text=None)))
        assert await service.generate_json(instructions) == ""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_request_never_reaches_provider(self):
        client = _client(SimpleNamespace(text="{}"))
        service = AIService(api_key="k", client=client)
        bad = TextGenerationRequest(name="bad", system="", user="u", schema={"type": "object"})

        with pytest.raises(ValueError):
            await service.generate_json(bad)
        client.aio.models.generate_content.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("error,expected", [
        (_api_error(genai_errors.ClientError, 429), APIRateLimitError),
        (_api_error(genai_errors.ClientError, 400), TextGenServiceError),
        (_api_error(genai_errors.ServerError, 503), TemporaryServiceError),
        (httpx.ConnectError("connection refused"), NetworkError),
    ])
    async def test_error_mapping(self, instructions, error, expected):
        service = AIService(api_key="k", client=_client(error=error))
        with pytest.raises(expected):
            await service.generate_json(instructions)
