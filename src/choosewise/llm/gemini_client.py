"""
Gemini client (Google Generative Language API).

The credential travels in the x-goog-api-key header rather than the query
string so it never shows up in logged URLs.
"""

from typing import Any, Dict

from choosewise.llm.base_client import BaseProviderClient
from choosewise.llm.exceptions import ProviderAuthError, ProviderError


class GeminiClient(BaseProviderClient):
    """
    Gemini provider adapter.

    System instructions and the user prompt are sent as one text part:
    "{system_prompt}\\n\\nUser Request: {prompt}".

    Response:
    {
        "candidates": [
            {"content": {"parts": [{"text": "..."}]}, "finishReason": "STOP"}
        ]
    }
    """

    name = "gemini"

    def build_request(self, prompt: str, system_prompt: str) -> tuple[str, Dict[str, Any], Dict[str, str]]:
        full_prompt = f"{system_prompt}\n\nUser Request: {prompt}"
        payload = {
            "contents": [{"parts": [{"text": full_prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self.max_tokens,
            },
        }
        headers = {
            "x-goog-api-key": self.api_key or "",
            "content-type": "application/json",
        }
        return f"/v1beta/models/{self.model}:generateContent", payload, headers

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]

    def classify_status(self, status_code: int, body: str) -> type[ProviderError]:
        # Gemini reports a bad key as 400 INVALID_ARGUMENT
        if status_code == 400 and "API_KEY_INVALID" in body:
            return ProviderAuthError
        return super().classify_status(status_code, body)
