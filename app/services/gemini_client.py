"""Structured-output client for Google Gemini."""

import asyncio
import json
import logging
import re
from typing import Any

import google.generativeai as genai

from app.core.config import Settings
from app.exceptions.ai import AIConfigurationError, AIParsingError, AIServiceError, AITimeoutError

logger = logging.getLogger(__name__)

_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")

# Keys of a JSON schema the Gemini response_schema accepts
_BACKEND_SCHEMA_KEYS = {"type", "format", "description", "nullable", "enum", "properties", "required", "items"}

# Draft-07 array bounds and their Gemini field names
_RENAMED_SCHEMA_KEYS = {"minItems": "min_items", "maxItems": "max_items"}


def sanitize_json_string(text: str) -> str:
    """Remove trailing commas before a closing bracket or brace."""
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def to_backend_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Reduce a draft-07 JSON schema to the subset Gemini understands.

    Annotations such as ``$schema``, ``title``, ``default`` and
    ``additionalProperties`` are dropped, array bounds are renamed to
    ``min_items``/``max_items``, and nested schemas are reduced too.
    """
    reduced: dict[str, Any] = {}
    for key, value in schema.items():
        if key in _RENAMED_SCHEMA_KEYS:
            reduced[_RENAMED_SCHEMA_KEYS[key]] = value
            continue
        if key not in _BACKEND_SCHEMA_KEYS:
            continue
        if key == "properties":
            reduced[key] = {name: to_backend_schema(sub) for name, sub in value.items()}
        elif key == "items":
            reduced[key] = to_backend_schema(value)
        else:
            reduced[key] = value
    return reduced


class GeminiClient:
    """Sends a prompt plus a JSON schema to Gemini and returns parsed JSON."""

    def __init__(self, settings: Settings):
        """Configure the Gemini SDK.

        Raises:
            AIConfigurationError: If ``GOOGLE_API_KEY`` is not configured.
        """
        if not settings.google_api_key:
            raise AIConfigurationError("Gemini API key not configured")

        genai.configure(api_key=settings.google_api_key)
        self.model_name = settings.gemini_model
        self.timeout = settings.ai_request_timeout
        self.model = genai.GenerativeModel(model_name=self.model_name)
        logger.info(f"Gemini client ready (model: {self.model_name})")

    async def generate_structured(self, prompt: str, schema: dict[str, Any]) -> Any:
        """Prompt Gemini for JSON constrained by ``schema`` and parse the reply.

        Raises:
            AITimeoutError: If the backend does not answer within the timeout.
            AIParsingError: If the cleaned reply is still not valid JSON.
            AIServiceError: For any other backend failure.
        """
        generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=to_backend_schema(schema),
        )

        try:
            response = await asyncio.wait_for(
                self.model.generate_content_async(prompt, generation_config=generation_config),
                timeout=self.timeout,
            )
            raw = response.text
        except TimeoutError:
            raise AITimeoutError("AI request timed out") from None
        except Exception as e:
            logger.error(f"AI service error: {str(e)}")
            raise AIServiceError(f"AI service error: {str(e)}") from e

        try:
            return json.loads(sanitize_json_string(raw))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse Gemini response: {raw!r}")
            raise AIParsingError(raw_response=raw) from e
