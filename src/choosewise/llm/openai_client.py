"""
OpenAI client (Chat Completions API).
"""

from typing import Any, Dict

from choosewise.llm.base_client import BaseProviderClient


class OpenAIClient(BaseProviderClient):
    """
    OpenAI provider adapter.

    POST /v1/chat/completions with a system message and a user message;
    the answer is choices[0].message.content.
    """

    name = "openai"

    def build_request(self, prompt: str, system_prompt: str) -> tuple[str, Dict[str, Any], Dict[str, str]]:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "content-type": "application/json",
        }
        return "/v1/chat/completions", payload, headers

    def extract_text(self, data: Dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"]
