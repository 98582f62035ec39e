"""
Failover orchestrator.

Single entry point for an advice request. Per request:

    INIT -> TRY(provider_i) -> SUCCESS          -> DONE
                            -> NEXT_PROVIDER    -> TRY(provider_i+1)
                            -> EMERGENCY        -> DONE

Providers are tried strictly in chain order; each gets its own retry budget
through the RetryExecutor. Provider failures are logged and recorded in the
RequestContext, never returned to the caller. When the chain is exhausted
the local emergency advisor answers.

Usage:
    orchestrator = FailoverOrchestrator.from_settings(settings)
    result = await orchestrator.handle(DecisionRequest(prompt=..., system_prompt=...))
"""

import functools
import time
from typing import Any, Callable, Optional, Sequence

import httpx
import structlog

from choosewise.advisor.emergency import GENERIC_FALLBACK_MESSAGE, generate_emergency_advice
from choosewise.config import Settings
from choosewise.llm.exceptions import ProviderError
from choosewise.models.advice_models import (
    AdviceResult,
    AttemptRecord,
    DecisionRequest,
    RequestContext,
)
from choosewise.models.enums import EMERGENCY_SERVED_BY, AttemptOutcome
from choosewise.monitoring.metrics import (
    advice_requests_total,
    emergency_fallbacks_total,
    provider_exhausted_total,
)
from choosewise.orchestrator.chain import ProviderSpec, build_provider_chain
from choosewise.retry.backoff import BackoffPolicy
from choosewise.retry.exceptions import AllProvidersExhausted, ConfigurationError
from choosewise.retry.executor import RetryExecutor

logger = structlog.get_logger(__name__)


class FailoverOrchestrator:
    """
    Drives the failover chain for one request at a time.

    Holds no per-request state: concurrent handle() calls only share the
    immutable chain and the stateless executor.

    Attributes:
        chain: Ordered provider specs (configured and unconfigured)
        executor: Retry executor used for every provider
        emergency_enabled: Whether the local advisor may answer
        emergency_advisor: prompt -> text function for the last resort
    """

    def __init__(
        self,
        chain: Sequence[ProviderSpec],
        executor: Optional[RetryExecutor] = None,
        emergency_enabled: bool = True,
        emergency_advisor: Callable[[str], str] = generate_emergency_advice,
    ):
        """
        Initialize orchestrator.

        Raises:
            ConfigurationError: No configured provider and emergency disabled
        """
        self.chain = tuple(chain)
        self.executor = executor or RetryExecutor()
        self.emergency_enabled = emergency_enabled
        self.emergency_advisor = emergency_advisor

        if not self.configured_providers:
            if not emergency_enabled:
                raise ConfigurationError(
                    "No provider API key configured and emergency fallback disabled"
                )
            logger.warning(
                "No provider configured - every request will get emergency advice",
                chain=[spec.name for spec in self.chain],
            )

        logger.info(
            "FailoverOrchestrator initialized",
            chain=[
                {"provider": s.name, "priority": s.priority, "max_retries": s.max_retries}
                for s in self.configured_providers
            ],
            emergency_enabled=emergency_enabled,
            base_delay_ms=self.executor.policy.base_delay_ms,
            jitter_max_ms=self.executor.policy.jitter_max_ms,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FailoverOrchestrator":
        return cls(
            chain=build_provider_chain(settings, transport=transport),
            executor=RetryExecutor(BackoffPolicy.from_settings(settings)),
            emergency_enabled=settings.EMERGENCY_FALLBACK_ENABLED,
        )

    @property
    def configured_providers(self) -> list[ProviderSpec]:
        return [spec for spec in self.chain if spec.is_configured()]

    async def handle(
        self,
        request: DecisionRequest,
        context: Optional[RequestContext] = None,
    ) -> AdviceResult:
        """
        Produce advice for one request.

        Args:
            request: Sanitized decision request
            context: Request trace (created when not supplied)

        Returns:
            AdviceResult with non-empty text, tagged with the serving
            provider or "emergency"

        Raises:
            AllProvidersExhausted: Only when the emergency path is disabled
        """
        context = context or RequestContext()
        log = logger.bind(request_id=context.request_id)
        last_error: Optional[BaseException] = None

        log.info(
            "Advice request started",
            prompt_length=len(request.prompt),
            providers=[spec.name for spec in self.configured_providers],
        )

        for spec in self.chain:
            if not spec.is_configured():
                log.debug("Skipping unconfigured provider", provider=spec.name)
                continue

            log.info(
                "Attempting provider",
                provider=spec.name,
                priority=spec.priority,
                max_retries=spec.max_retries,
            )
            call = functools.partial(spec.client.generate, request.prompt, request.system_prompt)

            try:
                text = await self.executor.execute(
                    call,
                    max_retries=spec.max_retries,
                    provider_name=spec.name,
                    timeout=spec.timeout,
                    context=context,
                )
            except ProviderError as e:
                last_error = e
                provider_exhausted_total.labels(provider=spec.name, error_kind=e.kind).inc()
                log.warning(
                    "Provider unavailable, advancing to next",
                    provider=spec.name,
                    status_code=e.status_code,
                    error_kind=e.kind,
                )
                continue

            advice_requests_total.labels(served_by=spec.name).inc()
            log.info(
                "Advice served",
                provider=spec.name,
                priority=spec.priority,
                attempts=len(context.attempts),
                duration_ms=context.elapsed_ms(),
            )
            return AdviceResult(
                text=text,
                served_by=spec.name,
                request_id=context.request_id,
                attempts=list(context.attempts),
            )

        return self._emergency(request, context, last_error)

    def _emergency(
        self,
        request: DecisionRequest,
        context: RequestContext,
        last_error: Optional[BaseException],
    ) -> AdviceResult:
        log = logger.bind(request_id=context.request_id)
        reason = "providers_exhausted" if self.configured_providers else "no_providers_configured"

        if not self.emergency_enabled:
            log.error(
                "All providers exhausted and emergency fallback disabled",
                attempts=len(context.attempts),
                duration_ms=context.elapsed_ms(),
            )
            raise AllProvidersExhausted(context=context, last_error=last_error)

        log.warning(
            "All providers unavailable - using emergency advice",
            reason=reason,
            attempts=len(context.attempts),
            last_error_kind=type(last_error).__name__ if last_error else None,
        )

        started = time.perf_counter()
        try:
            text = self.emergency_advisor(request.prompt)
        except Exception:
            log.exception("Emergency advisor failed, using generic message")
            text = GENERIC_FALLBACK_MESSAGE
        if not text or not text.strip():
            text = GENERIC_FALLBACK_MESSAGE

        context.record(
            AttemptRecord(
                provider=EMERGENCY_SERVED_BY,
                attempt_number=1,
                outcome=AttemptOutcome.SUCCESS,
                elapsed_ms=int((time.perf_counter() - started) * 1000),
            )
        )
        emergency_fallbacks_total.labels(reason=reason).inc()
        advice_requests_total.labels(served_by=EMERGENCY_SERVED_BY).inc()

        log.info("Emergency advice served", duration_ms=context.elapsed_ms())
        return AdviceResult(
            text=text,
            served_by=EMERGENCY_SERVED_BY,
            request_id=context.request_id,
            attempts=list(context.attempts),
        )

    def status(self) -> dict[str, Any]:
        """Configuration snapshot for the status endpoint (no secrets)."""
        return {
            "providers": [
                {
                    "name": spec.name,
                    "priority": spec.priority,
                    "configured": spec.is_configured(),
                    "max_retries": spec.max_retries,
                    "timeout_seconds": spec.timeout,
                    "model": spec.client.model,
                }
                for spec in self.chain
            ],
            "emergency_enabled": self.emergency_enabled,
            "retry": {
                "base_delay_ms": self.executor.policy.base_delay_ms,
                "jitter_max_ms": self.executor.policy.jitter_max_ms,
            },
        }

    async def close(self) -> None:
        """Close every provider client."""
        for spec in self.chain:
            await spec.client.close()
