"""
API routes for advice requests and service status.

POST /api/advice is the public operation; POST /api/claude keeps the path
existing frontends post to. Both run the same failover pipeline.
"""

from fastapi import APIRouter, Depends, Request, status

from choosewise.api.dependencies import (
    enforce_rate_limit,
    get_app_settings,
    get_orchestrator,
)
from choosewise.api.models import (
    AdviceRequestBody,
    AdviceResponse,
    AttemptView,
    ErrorResponse,
    HealthResponse,
    StatusResponse,
)
from choosewise.config import Settings
from choosewise.models.advice_models import RequestContext
from choosewise.orchestrator.failover import FailoverOrchestrator


router = APIRouter()

_ADVICE_RESPONSES = {
    200: {"description": "Advice generated (by a provider or the emergency advisor)"},
    400: {"model": ErrorResponse, "description": "Invalid request format"},
    429: {"model": ErrorResponse, "description": "Per-client rate limit exceeded"},
    503: {"model": ErrorResponse, "description": "No provider answered and emergency advice is disabled"},
}


@router.post(
    "/api/advice",
    response_model=AdviceResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Submit a decision request",
    description="""
    Route the prompt through the provider failover chain and return advice.

    Provider failures are retried and failed over silently; when every
    provider is unavailable a local heuristic answer is returned with
    servedBy="emergency".
    """,
    responses=_ADVICE_RESPONSES,
    dependencies=[Depends(enforce_rate_limit)],
)
@router.post(
    "/api/claude",
    response_model=AdviceResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Submit a decision request (legacy path)",
    deprecated=True,
    responses=_ADVICE_RESPONSES,
    dependencies=[Depends(enforce_rate_limit)],
)
async def submit_decision_request(
    body: AdviceRequestBody,
    request: Request,
    orchestrator: FailoverOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_app_settings),
) -> AdviceResponse:
    """
    Generate advice for a decision prompt.

    Args:
        body: Validated and sanitized request body
        request: Incoming request (carries request_id from the tracing middleware)
        orchestrator: Failover orchestrator (injected)
        settings: Application settings (injected)

    Returns:
        AdviceResponse with text, servedBy, timestamp and requestId
    """
    request_id = getattr(request.state, "request_id", None)
    context = RequestContext(request_id=request_id) if request_id else RequestContext()

    result = await orchestrator.handle(body.to_decision_request(), context)

    attempts = None
    if settings.DEBUG:
        attempts = [
            AttemptView(
                provider=a.provider,
                attempt_number=a.attempt_number,
                outcome=a.outcome.value,
                error_kind=a.error_kind,
                status_code=a.status_code,
                elapsed_ms=a.elapsed_ms,
            )
            for a in result.attempts
        ]

    return AdviceResponse(
        text=result.text,
        served_by=result.served_by,
        timestamp=result.timestamp,
        request_id=result.request_id,
        attempts=attempts,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
)
async def health_check() -> HealthResponse:
    """Report that the process is up. Providers are not contacted."""
    return HealthResponse(status="Server is running!")


@router.get(
    "/api/status",
    response_model=StatusResponse,
    summary="Service configuration status",
    description="""
    Returns which providers are configured, their order and retry budgets,
    whether emergency advice is enabled, and the rate-limit settings.
    No credentials are included.
    """,
)
async def service_status(
    orchestrator: FailoverOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_app_settings),
) -> StatusResponse:
    snapshot = orchestrator.status()
    return StatusResponse(
        providers=snapshot["providers"],
        emergency_enabled=snapshot["emergency_enabled"],
        retry=snapshot["retry"],
        rate_limit={
            "enabled": settings.RATE_LIMIT_ENABLED,
            "requests": settings.RATE_LIMIT_REQUESTS,
            "window_seconds": settings.RATE_LIMIT_WINDOW_SECONDS,
        },
    )
