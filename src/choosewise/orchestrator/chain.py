"""
Provider chain construction.

The failover chain is data: an ordered tuple of immutable ProviderSpec
entries built once at startup from settings. Adding, removing or reordering
providers is a PROVIDER_ORDER change, not a code change.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx
import structlog

from choosewise.config import Settings
from choosewise.llm import PROVIDER_CLIENTS
from choosewise.llm.base_client import BaseProviderClient
from choosewise.models.enums import ProviderPriority
from choosewise.retry.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProviderSpec:
    """
    One entry of the failover chain.

    Attributes:
        name: Provider name ("claude", "gemini", "openai")
        priority: "primary" or "fallback-N"
        max_retries: Retries after the first attempt for this provider
        timeout: Per-call ceiling in seconds
        client: Adapter exposing generate(prompt, system_prompt)
    """

    name: str
    priority: str
    max_retries: int
    timeout: float
    client: BaseProviderClient

    def is_configured(self) -> bool:
        return self.client.is_configured


def _client_options(name: str, settings: Settings) -> dict[str, Any]:
    """Provider-specific constructor arguments."""
    if name == "claude":
        return {
            "base_url": settings.ANTHROPIC_BASE_URL,
            "model": settings.CLAUDE_MODEL,
            "api_version": settings.ANTHROPIC_API_VERSION,
        }
    if name == "gemini":
        return {"base_url": settings.GEMINI_BASE_URL, "model": settings.GEMINI_MODEL}
    if name == "openai":
        return {"base_url": settings.OPENAI_BASE_URL, "model": settings.OPENAI_MODEL}
    raise ConfigurationError(f"No client options for provider '{name}'")


def build_provider_chain(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> tuple[ProviderSpec, ...]:
    """
    Build the ordered failover chain from settings.

    Every provider in PROVIDER_ORDER gets a spec, configured or not; the
    orchestrator skips unconfigured ones at request time. The first entry
    gets PRIMARY_MAX_RETRIES, the rest FALLBACK_MAX_RETRIES.

    Args:
        settings: Application settings
        transport: Optional httpx transport shared by all clients (tests)

    Raises:
        ConfigurationError: Unknown or duplicate provider name in PROVIDER_ORDER
    """
    chain: list[ProviderSpec] = []
    seen: set[str] = set()

    for position, raw_name in enumerate(settings.PROVIDER_ORDER):
        name = raw_name.strip().lower()
        client_cls = PROVIDER_CLIENTS.get(name)
        if client_cls is None:
            raise ConfigurationError(
                f"Unknown provider '{raw_name}' in PROVIDER_ORDER "
                f"(known: {', '.join(sorted(PROVIDER_CLIENTS))})"
            )
        if name in seen:
            raise ConfigurationError(f"Provider '{name}' listed twice in PROVIDER_ORDER")
        seen.add(name)

        client = client_cls(
            api_key=settings.api_key_for(name),
            timeout=settings.PROVIDER_TIMEOUT_SECONDS,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
            transport=transport,
            **_client_options(name, settings),
        )
        chain.append(
            ProviderSpec(
                name=name,
                priority=ProviderPriority.for_position(position),
                max_retries=(
                    settings.PRIMARY_MAX_RETRIES if position == 0
                    else settings.FALLBACK_MAX_RETRIES
                ),
                timeout=settings.PROVIDER_TIMEOUT_SECONDS,
                client=client,
            )
        )

    logger.info(
        "Provider chain built",
        order=[spec.name for spec in chain],
        configured=[spec.name for spec in chain if spec.is_configured()],
    )
    return tuple(chain)
