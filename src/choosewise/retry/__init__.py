"""
Per-provider retry with exponential backoff and jitter.

Main Components:
    - RetryExecutor: Bounded retry around one provider call
    - BackoffPolicy: base * 2^(k-1) + jitter delay schedule
    - AllProvidersExhausted: Every provider failed (internal signal)
    - ConfigurationError: Service cannot start

Usage:
    >>> from choosewise.retry import RetryExecutor, BackoffPolicy
    >>> executor = RetryExecutor(BackoffPolicy(base_delay_ms=1000, jitter_max_ms=1000))
    >>> text = await executor.execute(call, max_retries=3, provider_name="claude")
"""

from choosewise.retry.backoff import BackoffPolicy
from choosewise.retry.exceptions import AllProvidersExhausted, ConfigurationError
from choosewise.retry.executor import RetryExecutor

__all__ = [
    "BackoffPolicy",
    "RetryExecutor",
    "AllProvidersExhausted",
    "ConfigurationError",
]
