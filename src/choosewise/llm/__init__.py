"""
Provider adapters for remote text generation.

Components:
- BaseProviderClient: Abstract base with transport and failure classification
- ClaudeClient, GeminiClient, OpenAIClient: Wire-format adapters
- PROVIDER_CLIENTS: Provider name -> adapter class registry
- exceptions: Classified provider errors
"""

from choosewise.llm.base_client import BaseProviderClient
from choosewise.llm.claude_client import ClaudeClient
from choosewise.llm.gemini_client import GeminiClient
from choosewise.llm.openai_client import OpenAIClient
from choosewise.llm.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderInvalidResponseError,
    ProviderRateLimitError,
    ProviderRequestError,
    ProviderTimeoutError,
    ProviderTransientError,
)

PROVIDER_CLIENTS: dict[str, type[BaseProviderClient]] = {
    ClaudeClient.name: ClaudeClient,
    GeminiClient.name: GeminiClient,
    OpenAIClient.name: OpenAIClient,
}

__all__ = [
    "BaseProviderClient",
    "ClaudeClient",
    "GeminiClient",
    "OpenAIClient",
    "PROVIDER_CLIENTS",
    "ProviderError",
    "ProviderAuthError",
    "ProviderRateLimitError",
    "ProviderTransientError",
    "ProviderTimeoutError",
    "ProviderInvalidResponseError",
    "ProviderRequestError",
]
