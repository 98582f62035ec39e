"""
Unit tests for provider adapters.

Requests go through httpx.MockTransport, so wire formats and failure
classification are checked without network access.
"""

import json

import httpx
import pytest

from choosewise.llm.claude_client import ClaudeClient
from choosewise.llm.exceptions import (
    ProviderAuthError,
    ProviderInvalidResponseError,
    ProviderRateLimitError,
    ProviderRequestError,
    ProviderTimeoutError,
    ProviderTransientError,
)
from choosewise.llm.gemini_client import GeminiClient
from choosewise.llm.openai_client import OpenAIClient


class Recorder:
    """MockTransport handler returning one fixed reply and keeping requests."""

    def __init__(self, status_code=200, body=None, headers=None, text=None, raises=None):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.text = text
        self.raises = raises
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises is not None:
            raise self.raises
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text, headers=self.headers)
        return httpx.Response(self.status_code, json=self.body, headers=self.headers)

    @property
    def payload(self) -> dict:
        return json.loads(self.requests[-1].content)


def make_client(cls, recorder, api_key="secret-key", **kwargs):
    base_urls = {
        ClaudeClient: "https://api.anthropic.com",
        GeminiClient: "https://generativelanguage.googleapis.com",
        OpenAIClient: "https://api.openai.com",
    }
    return cls(
        api_key=api_key,
        base_url=base_urls[cls],
        model=kwargs.pop("model", "test-model"),
        timeout=5.0,
        max_tokens=1000,
        temperature=0.7,
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )


# ============================================================================
# Wire formats
# ============================================================================

@pytest.mark.asyncio
async def test_claude_request_and_response(provider_body):
    recorder = Recorder(body=provider_body("claude", "Claude says yes"))

    async with make_client(ClaudeClient, recorder, api_version="2023-06-01") as client:
        text = await client.generate("Should I?", "Be wise")

    assert text == "Claude says yes"
    request = recorder.requests[0]
    assert request.url.path == "/v1/messages"
    assert request.headers["x-api-key"] == "secret-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert recorder.payload == {
        "model": "test-model",
        "max_tokens": 1000,
        "system": "Be wise",
        "messages": [{"role": "user", "content": "Should I?"}],
    }


@pytest.mark.asyncio
async def test_claude_skips_non_text_blocks():
    recorder = Recorder(body={"content": [{"type": "thinking", "thinking": "..."}, {"type": "text", "text": "Answer"}]})

    async with make_client(ClaudeClient, recorder) as client:
        assert await client.generate("p", "s") == "Answer"


@pytest.mark.asyncio
async def test_gemini_request_and_response(provider_body):
    recorder = Recorder(body=provider_body("gemini", "Gemini says maybe"))

    async with make_client(GeminiClient, recorder, model="gemini-test") as client:
        text = await client.generate("Should I?", "Be wise")

    assert text == "Gemini says maybe"
    request = recorder.requests[0]
    assert request.url.path == "/v1beta/models/gemini-test:generateContent"
    assert request.headers["x-goog-api-key"] == "secret-key"
    assert "key" not in request.url.params
    payload = recorder.payload
    assert payload["contents"] == [{"parts": [{"text": "Be wise\n\nUser Request: Should I?"}]}]
    assert payload["generationConfig"] == {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 1000,
    }


@pytest.mark.asyncio
async def test_openai_request_and_response(provider_body):
    recorder = Recorder(body=provider_body("openai", "OpenAI says no"))

    async with make_client(OpenAIClient, recorder) as client:
        text = await client.generate("Should I?", "Be wise")

    assert text == "OpenAI says no"
    request = recorder.requests[0]
    assert request.url.path == "/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer secret-key"
    assert recorder.payload["messages"] == [
        {"role": "system", "content": "Be wise"},
        {"role": "user", "content": "Should I?"},
    ]


# ============================================================================
# Failure classification
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code, expected",
    [
        (401, ProviderAuthError),
        (403, ProviderAuthError),
        (429, ProviderRateLimitError),
        (500, ProviderTransientError),
        (503, ProviderTransientError),
        (529, ProviderTransientError),
        (408, ProviderTransientError),
        (400, ProviderRequestError),
        (404, ProviderRequestError),
    ],
)
@pytest.mark.parametrize("cls", [ClaudeClient, GeminiClient, OpenAIClient])
async def test_http_status_classification(cls, status_code, expected):
    recorder = Recorder(status_code=status_code, body={"error": {"message": "nope"}})

    async with make_client(cls, recorder) as client:
        with pytest.raises(expected) as exc_info:
            await client.generate("p", "s")

    assert type(exc_info.value) is expected
    assert exc_info.value.status_code == status_code
    assert exc_info.value.provider == cls.name
    assert exc_info.value.details["error"] == "nope"


@pytest.mark.asyncio
async def test_rate_limit_keeps_retry_after():
    recorder = Recorder(status_code=429, body={"error": {"type": "rate_limit_error"}}, headers={"Retry-After": "7"})

    async with make_client(ClaudeClient, recorder) as client:
        with pytest.raises(ProviderRateLimitError) as exc_info:
            await client.generate("p", "s")

    assert exc_info.value.details["retry_after"] == "7"
    assert exc_info.value.retryable is True


@pytest.mark.asyncio
async def test_gemini_invalid_key_is_auth_error():
    """Gemini reports a bad key as 400 INVALID_ARGUMENT with reason API_KEY_INVALID."""
    body = {
        "error": {
            "code": 400,
            "message": "API key not valid. Please pass a valid API key.",
            "status": "INVALID_ARGUMENT",
            "details": [{"reason": "API_KEY_INVALID"}],
        }
    }
    recorder = Recorder(status_code=400, body=body)

    async with make_client(GeminiClient, recorder) as client:
        with pytest.raises(ProviderAuthError):
            await client.generate("p", "s")


@pytest.mark.asyncio
async def test_unconfigured_client_never_calls_out():
    recorder = Recorder(body={})
    client = make_client(OpenAIClient, recorder, api_key=None)

    assert client.is_configured is False
    with pytest.raises(ProviderAuthError):
        await client.generate("p", "s")
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_timeout_maps_to_timeout_error():
    recorder = Recorder(raises=httpx.ReadTimeout("read timed out"))

    async with make_client(ClaudeClient, recorder) as client:
        with pytest.raises(ProviderTimeoutError) as exc_info:
            await client.generate("p", "s")

    assert exc_info.value.retryable is True


@pytest.mark.asyncio
async def test_connection_error_maps_to_transient():
    recorder = Recorder(raises=httpx.ConnectError("connection refused"))

    async with make_client(GeminiClient, recorder) as client:
        with pytest.raises(ProviderTransientError):
            await client.generate("p", "s")


# ============================================================================
# Invalid 2xx responses
# ============================================================================

@pytest.mark.asyncio
async def test_non_json_body_is_invalid_response():
    recorder = Recorder(text="<html>gateway</html>")

    async with make_client(OpenAIClient, recorder) as client:
        with pytest.raises(ProviderInvalidResponseError):
            await client.generate("p", "s")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "cls, body",
    [
        (ClaudeClient, {"content": []}),
        (ClaudeClient, {"id": "msg_1"}),
        (ClaudeClient, {"content": ["oops"]}),
        (ClaudeClient, {"content": "oops"}),
        (GeminiClient, {"candidates": []}),
        (GeminiClient, {"candidates": ["oops"]}),
        (GeminiClient, {"promptFeedback": {"blockReason": "SAFETY"}}),
        (OpenAIClient, {"choices": [{"message": {"content": None}}]}),
        (OpenAIClient, {"choices": []}),
        (OpenAIClient, ["oops"]),
    ],
)
async def test_missing_text_is_invalid_response(cls, body):
    recorder = Recorder(body=body)

    async with make_client(cls, recorder) as client:
        with pytest.raises(ProviderInvalidResponseError):
            await client.generate("p", "s")


@pytest.mark.asyncio
async def test_blank_text_is_invalid_response(provider_body):
    recorder = Recorder(body=provider_body("claude", "   "))

    async with make_client(ClaudeClient, recorder) as client:
        with pytest.raises(ProviderInvalidResponseError):
            await client.generate("p", "s")
