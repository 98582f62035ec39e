"""
FastAPI exception handlers for structured error responses.

Provider failures never get here: the orchestrator absorbs them. What is
left is bad input, rate limiting, the disabled-emergency case and bugs.
"""

import logging
import math
from datetime import datetime, timezone

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from choosewise.api.rate_limit import RateLimitExceeded
from choosewise.retry.exceptions import AllProvidersExhausted

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "I apologize, but I'm experiencing technical difficulties. "
    "Please try again in a moment."
)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle invalid request bodies (missing fields, empty or oversized prompts).

    Maps to 400 Bad Request (client error).
    """
    # Only field locations and messages; the rejected input may be a 10k prompt
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.warning(
        "Invalid request format",
        extra={"errors": errors},
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "invalid_request",
            "message": "Request validation failed",
            "details": jsonable_encoder(errors),
            "timestamp": _timestamp(),
        },
    )


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """
    Handle per-client rate limiting.

    Maps to 429 Too Many Requests with a Retry-After header.
    """
    retry_after = max(1, math.ceil(exc.retry_after))
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        headers={"Retry-After": str(retry_after)},
        content={
            "error": "rate_limited",
            "message": "Rate limit exceeded. Please try again in a few minutes.",
            "timestamp": _timestamp(),
        },
    )


async def all_providers_exhausted_handler(
    request: Request, exc: AllProvidersExhausted
) -> JSONResponse:
    """
    Handle exhaustion with the emergency advisor disabled.

    Maps to 503 Service Unavailable. Provider details stay in the logs.
    """
    logger.error(
        "All providers exhausted",
        extra={
            "request_id": exc.context.request_id,
            "attempts": [
                {
                    "provider": a.provider,
                    "attempt": a.attempt_number,
                    "outcome": a.outcome.value,
                    "error_kind": a.error_kind,
                    "status_code": a.status_code,
                }
                for a in exc.context.attempts
            ],
            "last_error": str(exc.last_error) if exc.last_error else None,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "service_unavailable",
            "message": UNAVAILABLE_MESSAGE,
            "timestamp": _timestamp(),
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception(
        "Unexpected error",
        extra={"error_type": type(exc).__name__},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": UNAVAILABLE_MESSAGE,
            "timestamp": _timestamp(),
        },
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    RequestValidationError: request_validation_error_handler,
    RateLimitExceeded: rate_limit_exceeded_handler,
    AllProvidersExhausted: all_providers_exhausted_handler,
    Exception: generic_error_handler,
}
