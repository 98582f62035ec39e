"""Monitoring and metrics instrumentation for the Choose-Wise Advice Service.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from choosewise.monitoring.metrics import (
    advice_requests_total,
    emergency_fallbacks_total,
    provider_attempts_total,
    provider_exhausted_total,
    provider_latency_seconds,
    rate_limited_requests_total,
)

__all__ = [
    "provider_attempts_total",
    "provider_exhausted_total",
    "provider_latency_seconds",
    "advice_requests_total",
    "emergency_fallbacks_total",
    "rate_limited_requests_total",
]
