"""
FastAPI API routes and endpoints.

- routes.py: POST /api/advice (+ legacy /api/claude), GET /health, GET /api/status
- dependencies.py: Dependency injection for settings, orchestrator, rate limiter
- models.py: API-specific request/response models
- rate_limit.py: Per-client sliding-window rate limiter
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request tracing
"""

from choosewise.api import dependencies, error_handlers, models
from choosewise.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
