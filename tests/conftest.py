"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
from typing import Any, Union

import httpx
import pytest

from choosewise.config import Settings


# Default provider hosts -> provider name
PROVIDER_HOSTS = {
    "api.anthropic.com": "claude",
    "generativelanguage.googleapis.com": "gemini",
    "api.openai.com": "openai",
}

DECISION_PROMPT = (
    "I need help deciding.\n"
    "**Option 1: Take the stable job**\n"
    "**Option 2: Pursue risky growth opportunity**"
)
SYSTEM_PROMPT = "You are a thoughtful decision advisor."


def success_body(provider: str, text: str) -> dict[str, Any]:
    """Well-formed 2xx body for a provider."""
    if provider == "claude":
        return {"content": [{"type": "text", "text": text}], "stop_reason": "end_turn"}
    if provider == "gemini":
        return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}]}
    if provider == "openai":
        return {"choices": [{"message": {"role": "assistant", "content": text}}]}
    raise ValueError(f"Unknown provider {provider}")


# One scripted reply: (status, json body) or an exception to raise
ScriptedReply = Union[tuple[int, Any], Exception]


class ScriptedProviders:
    """httpx.MockTransport that answers each provider from a script.

    Each provider gets a list of replies consumed in order; the last reply
    repeats once the list is used up. Providers without a script answer 500.
    Every request is recorded in `calls` as (provider, path, json payload).
    """

    def __init__(self, scripts: dict[str, list[ScriptedReply]]):
        self.scripts = {name: list(replies) for name, replies in scripts.items()}
        self.calls: list[tuple[str, str, dict]] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        provider = PROVIDER_HOSTS.get(request.url.host, request.url.host)
        payload = json.loads(request.content) if request.content else {}
        self.calls.append((provider, request.url.path, payload))

        replies = self.scripts.get(provider) or [(500, {"error": {"message": "unscripted"}})]
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        status_code, body = reply
        return httpx.Response(status_code, json=body)

    def calls_for(self, provider: str) -> int:
        return sum(1 for name, _, _ in self.calls if name == provider)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    All three providers are configured and backoff delays are zero so retry
    paths run instantly. Override specific settings in individual tests:
        def test_something(test_settings):
            test_settings.EMERGENCY_FALLBACK_ENABLED = False
    """
    return Settings(
        _env_file=None,

        # === Application ===
        APP_NAME="Choose-Wise Advice Service (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Providers ===
        ANTHROPIC_API_KEY="test-anthropic-key",
        GEMINI_API_KEY="test-gemini-key",
        OPENAI_API_KEY="test-openai-key",
        # Pinned so a developer's proxy URLs never bypass ScriptedProviders routing
        ANTHROPIC_BASE_URL="https://api.anthropic.com",
        GEMINI_BASE_URL="https://generativelanguage.googleapis.com",
        OPENAI_BASE_URL="https://api.openai.com",
        PROVIDER_ORDER=["claude", "gemini", "openai"],
        PROVIDER_TIMEOUT_SECONDS=5.0,

        # === Retry ===
        PRIMARY_MAX_RETRIES=3,
        FALLBACK_MAX_RETRIES=2,
        RETRY_BASE_DELAY_MS=0,
        RETRY_JITTER_MAX_MS=0,
        EMERGENCY_FALLBACK_ENABLED=True,

        # === Rate Limiting ===
        RATE_LIMIT_ENABLED=False,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def scripted_providers():
    """Factory fixture for a scripted provider transport.

    Usage:
        def test_something(scripted_providers, provider_body):
            providers = scripted_providers(
                claude=[(503, {}), (200, provider_body("claude", "Go for it"))],
            )
            app = create_app(settings, transport=providers.transport)
    """
    def _create(**scripts: list[ScriptedReply]) -> ScriptedProviders:
        return ScriptedProviders(scripts)

    return _create


@pytest.fixture
def provider_body():
    """Builder for a well-formed 2xx provider body: provider_body("claude", "text")."""
    return success_body


@pytest.fixture
def decision_prompt() -> str:
    """Prompt with two option markers (stable job vs risky growth)."""
    return DECISION_PROMPT


@pytest.fixture
def system_prompt() -> str:
    return SYSTEM_PROMPT
