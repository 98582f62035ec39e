"""Custom Prometheus metrics for the Choose-Wise Advice Service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- emergency_fallbacks_total (every provider down, users get heuristic advice)
- provider_exhausted_total (a provider burned its whole retry budget)
- provider_attempts_total{outcome="fatal_failure"} (bad or revoked credentials)
"""

from prometheus_client import Counter, Histogram

# === Provider Attempt Metrics ===

provider_attempts_total = Counter(
    "provider_attempts_total",
    "Total provider attempts by provider and outcome",
    ["provider", "outcome"],
)
"""
Provider attempts counter.

Labels:
- provider: claude, gemini, openai
- outcome: success, retryable_failure, fatal_failure

Alert thresholds:
- WARN: retryable_failure rate > 10% of attempts
- CRITICAL: any fatal_failure (credential problem)
"""

provider_exhausted_total = Counter(
    "provider_exhausted_total",
    "Provider turns that ended without a usable answer",
    ["provider", "error_kind"],
)

provider_latency_seconds = Histogram(
    "provider_latency_seconds",
    "Provider call latency in seconds",
    ["provider", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 35.0, 60.0],
)
"""
Provider call latency histogram (one observation per outbound call).

Buckets stop just past the default 35s per-call timeout.
"""

# === Request Outcome Metrics ===

advice_requests_total = Counter(
    "advice_requests_total",
    "Advice requests by the provider that served them",
    ["served_by"],
)

emergency_fallbacks_total = Counter(
    "emergency_fallbacks_total",
    "Requests answered by the local emergency advisor",
    ["reason"],
)
"""
Emergency fallback counter.

Labels:
- reason: providers_exhausted, no_providers_configured

Alert thresholds:
- WARN: any entry
- CRITICAL: rate > 5% of advice requests
"""

rate_limited_requests_total = Counter(
    "rate_limited_requests_total",
    "Requests rejected by the per-client rate limiter",
)
