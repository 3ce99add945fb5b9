"""Text generation service using Google GenAI.

The roast pipeline only needs one capability from the model: take a
TextGenerationRequest (system instructions, user instructions, output
schema) and return the raw JSON text. Parsing and fallbacks live with the
callers, so a malformed answer never turns into an exception here.
"""

import logging
from typing import Optional

import httpx
from google.genai import Client
from google.genai import errors as genai_errors
from google.genai import types

from roast_agent.models import TextGenerationRequest
from utils.retry import APIRateLimitError, NetworkError, TemporaryServiceError

logger = logging.getLogger(__name__)


class TextGenServiceError(Exception):
    """Raised when the text generation provider rejects a request."""


class AIService:
    """Async JSON text generation on top of Gemini."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        client: Optional[Client] = None,
    ):
        """Initialize Google GenAI client.

        Args:
            api_key: Google GenAI API key
            model_name: Gemini model to use
            client: Pre-built client (tests inject a mock here)
        """
        self.api_key = api_key
        self.model_name = model_name
        self.client = client if client is not None else Client(api_key=api_key)
        logger.info(f"Initialized AI service with model: {model_name}")

    async def generate_json(self, request: TextGenerationRequest) -> str:
        """Send one instruction object and return the model's raw text.

        Args:
            request: Validated instruction object

        Returns:
            Response text, possibly empty or not valid JSON

        Raises:
            APIRateLimitError: Provider rate limited the call
            TemporaryServiceError: Provider returned a server error
            NetworkError: The request never got an answer
            TextGenServiceError: Provider rejected the request
        """
        request.validate()
        config = types.GenerateContentConfig(
            system_instruction=request.system,
            temperature=request.temperature,
            response_mime_type="application/json",
            response_json_schema=request.schema,
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=request.user,
                config=config,
            )
        except genai_errors.ClientError as e:
            if e.code == 429:
                raise APIRateLimitError(f"Rate limit hit on {request.name}: {e}") from e
            raise TextGenServiceError(f"{request.name} rejected by {self.model_name}: {e}") from e
        except genai_errors.ServerError as e:
            raise TemporaryServiceError(f"{self.model_name} server error on {request.name}: {e}") from e
        except httpx.TransportError as e:
            raise NetworkError(f"Network error on {request.name}: {e}") from e

        text = response.text or ""
        if not text:
            logger.warning(f"Empty AI response for {request.name}")
        else:
            logger.debug(f"{request.name} response ({len(text)} chars): {text[:200]}")
        return text
