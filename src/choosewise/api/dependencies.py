"""
FastAPI dependency injection for the advice service.

The orchestrator and the rate limiter are built once per app (see
choosewise.main.create_app) and live on app.state; these dependencies hand
them to routes so nothing relies on module-level mutable state.
"""

from typing import Optional

from fastapi import Depends, Request

from choosewise.api.rate_limit import SlidingWindowRateLimiter
from choosewise.config import Settings
from choosewise.orchestrator.failover import FailoverOrchestrator


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_orchestrator(request: Request) -> FailoverOrchestrator:
    """
    Get the app's failover orchestrator.

    Built once in create_app(); stateless across requests.
    """
    return request.app.state.orchestrator


def get_rate_limiter(request: Request) -> Optional[SlidingWindowRateLimiter]:
    """Get the app's rate limiter (None when rate limiting is disabled)."""
    return request.app.state.rate_limiter


async def enforce_rate_limit(
    request: Request,
    limiter: Optional[SlidingWindowRateLimiter] = Depends(get_rate_limiter),
) -> None:
    """
    Count the request against its client's budget.

    Raises:
        RateLimitExceeded: Client is over budget (mapped to HTTP 429)
    """
    if limiter is None:
        return
    key = request.client.host if request.client else "unknown"
    await limiter.acquire(key)
