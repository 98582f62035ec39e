"""
Abstract base client for remote text-generation providers.

Defines the uniform capability every provider adapter (Claude, Gemini,
OpenAI) exposes: generate(prompt, system_prompt) -> text. Subclasses only
describe their wire format; transport, timeouts and failure classification
live here so every provider fails the same way.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from choosewise.llm.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderInvalidResponseError,
    ProviderRateLimitError,
    ProviderRequestError,
    ProviderTimeoutError,
    ProviderTransientError,
)
from choosewise.monitoring.metrics import provider_latency_seconds


logger = structlog.get_logger(__name__)


class BaseProviderClient(ABC):
    """
    Abstract base class for provider adapters.

    Responsibilities:
    - Send one generation request per call to the provider
    - Parse the response down to plain text
    - Classify failures into ProviderError subclasses

    Does NOT handle:
    - Retries or backoff (that's RetryExecutor's job)
    - Choosing between providers (that's FailoverOrchestrator's job)
    """

    name: str = "base"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        model: str,
        timeout: float = 35.0,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        connection_limits: Optional[httpx.Limits] = None,
    ):
        """
        Initialize base client.

        Args:
            api_key: Provider credential (None means "not configured")
            base_url: Base URL of the provider API
            model: Model identifier sent with each request
            timeout: Per-call timeout in seconds
            max_tokens: Completion token limit
            temperature: Sampling temperature
            transport: Optional httpx transport (tests use httpx.MockTransport)
            connection_limits: httpx connection pool limits
        """
        self.api_key = api_key or None
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._transport = transport
        self._connection_limits = connection_limits or httpx.Limits(
            max_keepalive_connections=5,
            max_connections=20,
            keepalive_expiry=30.0,
        )
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized provider client",
            provider=self.name,
            base_url=self.base_url,
            model=model,
            timeout=timeout,
            configured=self.is_configured,
        )

    @property
    def is_configured(self) -> bool:
        """True when a credential is present."""
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient", provider=self.name)
        return self._client

    @abstractmethod
    def build_request(self, prompt: str, system_prompt: str) -> tuple[str, Dict[str, Any], Dict[str, str]]:
        """
        Translate (prompt, system_prompt) to the provider's wire format.

        Returns:
            Tuple of (path, JSON payload, extra headers)
        """
        pass

    @abstractmethod
    def extract_text(self, data: Dict[str, Any]) -> str:
        """
        Pull the generated text out of a decoded 2xx response body.

        May raise KeyError/IndexError/TypeError on unexpected shapes; the
        base class turns those into ProviderInvalidResponseError.
        """
        pass

    def classify_status(self, status_code: int, body: str) -> type[ProviderError]:
        """Map a non-2xx HTTP status to a ProviderError subclass."""
        if status_code in (401, 403):
            return ProviderAuthError
        if status_code == 429:
            return ProviderRateLimitError
        if status_code >= 500 or status_code in (408, 409):
            return ProviderTransientError
        return ProviderRequestError

    async def generate(self, prompt: str, system_prompt: str) -> str:
        """
        Generate text for a single-turn request.

        Makes exactly one outbound call bounded by the client timeout.

        Raises:
            ProviderAuthError: Missing or rejected credential
            ProviderRateLimitError: HTTP 429
            ProviderTransientError: Network failure or 5xx
            ProviderTimeoutError: Call exceeded the timeout
            ProviderInvalidResponseError: 2xx without usable text
            ProviderRequestError: Other 4xx
        """
        if not self.is_configured:
            raise ProviderAuthError(
                f"{self.name} API key not configured",
                provider=self.name,
            )

        path, payload, headers = self.build_request(prompt, system_prompt)
        start_time = time.perf_counter()

        logger.debug(
            "Sending generation request",
            provider=self.name,
            model=self.model,
            prompt_length=len(prompt),
            system_prompt_length=len(system_prompt),
        )

        try:
            client = await self._get_client()
            response = await client.post(path, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            self._observe(start_time, success=False)
            raise ProviderTimeoutError(
                f"{self.name} request timeout after {self.timeout}s",
                provider=self.name,
                details={"timeout": self.timeout, "error_type": type(e).__name__},
            ) from e
        except httpx.HTTPError as e:
            # ConnectError, ReadError, RemoteProtocolError, ...
            self._observe(start_time, success=False)
            raise ProviderTransientError(
                f"{self.name} network error: {e}",
                provider=self.name,
                details={"error_type": type(e).__name__},
            ) from e

        if response.is_error:
            self._observe(start_time, success=False)
            error_cls = self.classify_status(response.status_code, response.text)
            details: Dict[str, Any] = {"error": self._error_message(response)}
            retry_after = response.headers.get("retry-after")
            if retry_after:
                details["retry_after"] = retry_after
            raise error_cls(
                f"{self.name} returned HTTP {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                details=details,
            )

        try:
            data = response.json()
            text = self.extract_text(data)
        except (json.JSONDecodeError, ValueError) as e:
            self._observe(start_time, success=False)
            raise ProviderInvalidResponseError(
                f"Invalid JSON response from {self.name}",
                provider=self.name,
                status_code=response.status_code,
                details={"parse_error": str(e)},
            ) from e
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            self._observe(start_time, success=False)
            raise ProviderInvalidResponseError(
                f"{self.name} response missing generated text",
                provider=self.name,
                status_code=response.status_code,
                details={"missing": repr(e)},
            ) from e

        if not isinstance(text, str) or not text.strip():
            self._observe(start_time, success=False)
            raise ProviderInvalidResponseError(
                f"Empty response from {self.name}",
                provider=self.name,
                status_code=response.status_code,
            )

        latency_ms = self._observe(start_time, success=True)
        logger.info(
            "Provider generation successful",
            provider=self.name,
            model=self.model,
            latency_ms=latency_ms,
            response_length=len(text),
        )
        return text

    def _observe(self, start_time: float, success: bool) -> int:
        elapsed = time.perf_counter() - start_time
        provider_latency_seconds.labels(
            provider=self.name, success=str(success).lower()
        ).observe(elapsed)
        return int(elapsed * 1000)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Best-effort provider error message, e.g. {"error": {"message": ...}}."""
        try:
            data = response.json()
        except ValueError:
            return response.text[:500]
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict):
            return str(error.get("message") or error.get("type") or error)
        if error:
            return str(error)
        return response.text[:500]

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed provider client", provider=self.name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"model={self.model}, "
            f"timeout={self.timeout}s)"
        )
