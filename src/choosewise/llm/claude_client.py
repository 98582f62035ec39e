"""
Claude client (Anthropic Messages API).

POST /v1/messages with the system prompt in the top-level "system" field and
the user prompt as a single user message.
"""

from typing import Any, Dict

from choosewise.llm.base_client import BaseProviderClient


class ClaudeClient(BaseProviderClient):
    """
    Anthropic provider adapter - primary service in the default chain.

    Request:
    {
        "model": "claude-3-5-sonnet-latest",
        "max_tokens": 1000,
        "system": "...",
        "messages": [{"role": "user", "content": "..."}]
    }

    Response:
    {
        "content": [{"type": "text", "text": "..."}],
        "stop_reason": "end_turn",
        ...
    }
    """

    name = "claude"

    def __init__(self, *args, api_version: str = "2023-06-01", **kwargs):
        self.api_version = api_version
        super().__init__(*args, **kwargs)

    def build_request(self, prompt: str, system_prompt: str) -> tuple[str, Dict[str, Any], Dict[str, str]]:
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self.api_key or "",
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }
        return "/v1/messages", payload, headers

    def extract_text(self, data: Dict[str, Any]) -> str:
        blocks = data["content"]
        # Take the first text block; tool_use or thinking blocks carry no advice
        for block in blocks:
            if isinstance(block, dict) and block.get("type", "text") == "text":
                return block["text"]
        raise KeyError("content[].text")
