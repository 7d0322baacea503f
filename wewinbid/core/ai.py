"""
Thin wrapper around the Google Gemini client.
"""
import json
import logging
from typing import Any, Dict, Iterator, Optional

import google.genai as genai

from wewinbid.config import settings
from wewinbid.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Text generation with Google Gemini."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key or settings.GOOGLE_API_KEY
        if not api_key:
            raise ValueError("GOOGLE_API_KEY not configured")
        self.client = genai.Client(api_key=api_key)
        self.model = model or settings.GEMINI_MODEL

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.GOOGLE_API_KEY)

    def generate_text(self, prompt: str) -> str:
        try:
            response = self.client.models.generate_content(model=self.model, contents=prompt)
        except Exception as e:
            logger.error(f"Gemini generation failed: {e}", exc_info=True)
            raise ExternalServiceError("AI provider request failed", {"service": "gemini", "error": str(e)})
        if not response.text:
            raise ExternalServiceError("AI provider returned an empty response", {"service": "gemini"})
        return response.text

    def stream_text(self, prompt: str) -> Iterator[str]:
        try:
            for chunk in self.client.models.generate_content_stream(model=self.model, contents=prompt):
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            logger.error(f"Gemini streaming failed: {e}", exc_info=True)
            raise ExternalServiceError("AI provider request failed", {"service": "gemini", "error": str(e)})


def parse_json_response(response_text: str) -> Dict[str, Any]:
    """Parse a JSON object from a model reply, tolerating ```json fences."""
    cleaned_text = response_text.strip()
    if cleaned_text.startswith("```"):
        first_newline = cleaned_text.find("\n")
        if first_newline != -1:
            cleaned_text = cleaned_text[first_newline + 1:]
        if cleaned_text.endswith("```"):
            cleaned_text = cleaned_text[:-3]
    cleaned_text = cleaned_text.strip()

    start, end = cleaned_text.find("{"), cleaned_text.rfind("}")
    if start == -1 or end == -1:
        raise ValueError("No JSON object found in response")
    result = json.loads(cleaned_text[start:end + 1])
    if not isinstance(result, dict):
        raise ValueError("Expected a JSON object")
    return result
