"""FastAPI middleware for request tracing and logging."""

import time
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from choosewise.models.advice_models import new_request_id

logger = structlog.get_logger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID tracing to all requests.

    Features:
    - Generates a short request_id for each request (request.state.request_id)
    - Binds request_id to structlog context (appears in all logs)
    - Adds X-Request-ID response header for client correlation
    - Logs request start/end with duration
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Process request with tracing context."""
        request_id = new_request_id()
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        logger.info("Request started")

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "Request failed",
                exc_info=exc,
                duration_ms=round(duration_ms, 2),
            )
            raise

        finally:
            # Prevent leakage to other requests
            structlog.contextvars.clear_contextvars()
