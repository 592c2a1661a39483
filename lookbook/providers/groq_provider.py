"""Groq vision provider for item suggestions.

Sends one chat completion to Groq's OpenAI-compatible endpoint with the item
photo attached as a data URL and parses the JSON object the model returns.
Each suggestion is a single request; failures are raised to the caller and
never retried.
"""

from __future__ import annotations

import json
import os

import aiohttp

from lookbook.core.logging import get_logger
from lookbook.core.providers import ItemSuggestion

logger = get_logger(__name__)

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
DEFAULT_MAX_TOKENS = 300

SUGGESTION_PROMPT = """You are a flea market vendor with a sharp eye. Look at this one item and reply with ONLY a JSON object:
{
  "name": "3-5 words naming THIS piece, not just its category. Lead with what sets it apart: color, era, material, detail (say 'Faded Indigo Straight Leg', not 'Vintage Denim Jeans')",
  "description": "2-3 sentences about what you actually see: wash, hardware, stitching, wear, fit, era. Write it the way you'd tell a friend why it's worth grabbing, with no filler.",
  "suggested_size": "a size if the item is wearable (S, M, L, XL, 32x30, ...), otherwise null"
}
Return the JSON object and nothing else: no prose, no markdown."""


class GroqAPIError(Exception):
    """Raised when the Groq request fails or returns an unusable answer.

    Attributes:
        status: HTTP status from Groq, if the request got that far.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class GroqSuggestionProvider:
    """SuggestionProvider backed by a Groq-hosted vision model.

    Args:
        api_key: Groq API key. Falls back to the GROQ_API_KEY env var.
        model: Model identifier. Falls back to GROQ_MODEL, then DEFAULT_MODEL.
        max_tokens: Completion token limit.
        timeout: Total request timeout in seconds.

    Raises:
        ValueError: If no API key is available.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = 30.0,
    ) -> None:
        effective_api_key = api_key or os.environ.get("GROQ_API_KEY")
        if not effective_api_key:
            raise ValueError(
                "GROQ_API_KEY environment variable is not set. "
                "Please set it or provide an api_key parameter."
            )
        self._api_key = effective_api_key
        self._model = model or os.environ.get("GROQ_MODEL") or DEFAULT_MODEL
        self._max_tokens = max_tokens
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def build_payload(self, image_base64: str, media_type: str) -> dict:
        """Request body for one suggestion."""
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "response_format": {"type": "json_object"},
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": SUGGESTION_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:{media_type};base64,{image_base64}"
                            },
                        },
                    ],
                }
            ],
        }

    async def suggest(self, image_base64: str, media_type: str) -> ItemSuggestion:
        """Ask the model for listing fields for one photo.

        Raises:
            GroqAPIError: On network failure or timeout, a non-200 response, or content
                that is not a valid suggestion object.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        payload = self.build_payload(image_base64, media_type)

        logger.debug("groq_suggestion_requested", model=self._model, media_type=media_type)

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    GROQ_CHAT_URL,
                    json=payload,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self._timeout),
                ) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(
                            "groq_request_failed",
                            status=response.status,
                            body=error_text[:500],
                        )
                        raise GroqAPIError(
                            f"Groq API error {response.status}: {error_text}",
                            status=response.status,
                        )
                    data = await response.json()
        except TimeoutError as ex:
            logger.error("groq_timeout", timeout=self._timeout)
            raise GroqAPIError(f"Groq request timed out after {self._timeout}s") from ex
        except aiohttp.ClientError as ex:
            logger.error("groq_network_error", error=str(ex))
            raise GroqAPIError(f"Network error during Groq request: {ex}") from ex

        return self._parse(data)

    def _parse(self, data: dict) -> ItemSuggestion:
        choices = data.get("choices") or []
        content = None
        if choices:
            content = (choices[0].get("message") or {}).get("content")
        if not content:
            raise GroqAPIError("No content returned from Groq")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as ex:
            raise GroqAPIError(f"Groq returned invalid JSON: {ex}") from ex
        if not isinstance(parsed, dict):
            raise GroqAPIError("Groq returned JSON that is not an object")

        try:
            suggestion = ItemSuggestion.from_dict(parsed)
        except ValueError as ex:
            raise GroqAPIError(str(ex)) from ex

        logger.info("groq_suggestion_received", name=suggestion.name)
        return suggestion
