"""
Retry executor for a single provider.

Wraps one zero-argument provider call with bounded retry:

    attempt 0          -> immediately
    attempt k (k >= 1) -> after BackoffPolicy.delay_ms(k)

Auth errors end the provider's turn after one attempt; any other failure
is retried until the budget is spent. Every call runs under a hard timeout
ceiling; a timed-out call is one failed attempt. Unexpected exceptions from
the call are wrapped as ProviderTransientError and retried the same way.

The executor is provider-agnostic and keeps no state between invocations:
no shared counters, no circuit breaker.

Usage:
    executor = RetryExecutor(BackoffPolicy.from_settings(settings))
    text = await executor.execute(
        lambda: client.generate(prompt, system_prompt),
        max_retries=3,
        provider_name="claude",
        timeout=35.0,
        context=ctx,
    )
"""

import asyncio
import random
import time
from typing import Awaitable, Callable, Optional

import structlog

from choosewise.llm.exceptions import (
    ProviderError,
    ProviderInvalidResponseError,
    ProviderTimeoutError,
    ProviderTransientError,
)
from choosewise.models.advice_models import AttemptRecord, RequestContext
from choosewise.models.enums import AttemptOutcome
from choosewise.monitoring.metrics import provider_attempts_total
from choosewise.retry.backoff import BackoffPolicy, JitterSource

logger = structlog.get_logger(__name__)

ProviderCall = Callable[[], Awaitable[str]]
Sleeper = Callable[[float], Awaitable[None]]


class RetryExecutor:
    """
    Bounded retry with exponential backoff and jitter.

    Attributes:
        policy: Backoff delays
        sleep: Coroutine used to wait between attempts (asyncio.sleep)
        jitter_source: Random source for the jitter addend (random.uniform)
    """

    def __init__(
        self,
        policy: Optional[BackoffPolicy] = None,
        sleep: Sleeper = asyncio.sleep,
        jitter_source: JitterSource = random.uniform,
    ):
        self.policy = policy or BackoffPolicy()
        self.sleep = sleep
        self.jitter_source = jitter_source

    async def execute(
        self,
        call: ProviderCall,
        max_retries: int,
        provider_name: str,
        timeout: Optional[float] = None,
        context: Optional[RequestContext] = None,
    ) -> str:
        """
        Run `call` up to max_retries + 1 times.

        Args:
            call: Zero-argument coroutine factory for one provider attempt
            max_retries: Retries after the first attempt
            provider_name: Name used in logs, metrics and attempt records
            timeout: Per-call ceiling in seconds (None = rely on the client)
            context: Request trace to append AttemptRecords to

        Returns:
            Non-empty generated text

        Raises:
            ProviderError: The non-retryable error, or the last error once
                the budget is spent
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        total_attempts = max_retries + 1
        last_error: Optional[ProviderError] = None

        for attempt in range(total_attempts):
            if attempt > 0:
                delay_ms = self.policy.delay_ms(attempt, self.jitter_source)
                logger.info(
                    "Provider retry scheduled",
                    provider=provider_name,
                    retry=attempt,
                    max_retries=max_retries,
                    delay_ms=round(delay_ms),
                )
                await self.sleep(delay_ms / 1000.0)

            started = time.perf_counter()
            try:
                text = await self._call_with_ceiling(call, timeout, provider_name)
                if not isinstance(text, str) or not text.strip():
                    raise ProviderInvalidResponseError(
                        f"{provider_name} returned empty text",
                        provider=provider_name,
                    )
            except ProviderError as e:
                last_error = e
                outcome = (
                    AttemptOutcome.RETRYABLE_FAILURE if e.retryable
                    else AttemptOutcome.FATAL_FAILURE
                )
                self._record(context, provider_name, attempt, outcome, started, e)

                logger.warning(
                    "Provider attempt failed",
                    provider=provider_name,
                    attempt=attempt + 1,
                    total_attempts=total_attempts,
                    status_code=e.status_code,
                    error_kind=e.kind,
                    error=e.message,
                )

                if not e.retryable:
                    logger.warning(
                        "Provider error is not retryable",
                        provider=provider_name,
                        error_kind=e.kind,
                    )
                    raise

                if attempt == max_retries:
                    logger.error(
                        "Provider exhausted all attempts",
                        provider=provider_name,
                        total_attempts=total_attempts,
                        error_kind=e.kind,
                    )
                    raise
                continue

            self._record(context, provider_name, attempt, AttemptOutcome.SUCCESS, started)
            if attempt > 0:
                logger.info(
                    "Provider recovered",
                    provider=provider_name,
                    attempt=attempt + 1,
                )
            return text

        # Unreachable: the loop either returns or raises on its last attempt
        raise last_error or ProviderError("No attempt made", provider=provider_name)

    @staticmethod
    async def _call_with_ceiling(
        call: ProviderCall, timeout: Optional[float], provider_name: str
    ) -> str:
        try:
            if timeout is None:
                return await call()
            return await asyncio.wait_for(call(), timeout=timeout)
        except asyncio.TimeoutError:
            raise ProviderTimeoutError(
                f"{provider_name} call exceeded {timeout}s ceiling",
                provider=provider_name,
                details={"timeout": timeout},
            ) from None
        except ProviderError:
            raise
        except Exception as e:
            # Adapter bug or unexpected library error: one failed attempt like any other
            raise ProviderTransientError(
                f"{provider_name} unexpected error: {e}",
                provider=provider_name,
                details={"error_type": type(e).__name__},
            ) from e

    @staticmethod
    def _record(
        context: Optional[RequestContext],
        provider_name: str,
        attempt: int,
        outcome: AttemptOutcome,
        started: float,
        error: Optional[ProviderError] = None,
    ) -> None:
        provider_attempts_total.labels(provider=provider_name, outcome=outcome.value).inc()
        if context is None:
            return
        context.record(
            AttemptRecord(
                provider=provider_name,
                attempt_number=attempt + 1,
                outcome=outcome,
                error_kind=error.kind if error else None,
                status_code=error.status_code if error else None,
                elapsed_ms=int((time.perf_counter() - started) * 1000),
            )
        )
