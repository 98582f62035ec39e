"""
API-specific request and response models for FastAPI endpoints.

The request model is the validation and sanitization boundary: anything that
reaches the orchestrator has been trimmed, stripped of control characters
and length-checked.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from choosewise.models.advice_models import DecisionRequest

# Keeps \t, \n and \r
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdviceRequestBody(BaseModel):
    """Request body for the advice endpoints."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    prompt: str = Field(
        min_length=1,
        max_length=10_000,
        description="Decision prompt; options marked as **Option N: label**",
    )
    system_prompt: str = Field(
        alias="systemPrompt",
        min_length=1,
        max_length=20_000,
        description="System instructions for the provider",
    )

    @field_validator("prompt", "system_prompt", mode="before")
    @classmethod
    def strip_control_characters(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _CONTROL_CHARS.sub("", value)
        return value

    def to_decision_request(self) -> DecisionRequest:
        return DecisionRequest(prompt=self.prompt, system_prompt=self.system_prompt)


class AttemptView(BaseModel):
    """Attempt trace entry (only returned when DEBUG is on)."""

    provider: str
    attempt_number: int
    outcome: str
    error_kind: Optional[str] = None
    status_code: Optional[int] = None
    elapsed_ms: int


class AdviceResponse(BaseModel):
    """Response for the advice endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(description="Generated advice")
    served_by: str = Field(
        alias="servedBy",
        description="Provider that produced the advice, or 'emergency'",
        examples=["claude", "gemini", "openai", "emergency"],
    )
    timestamp: datetime = Field(description="Completion timestamp (UTC)")
    request_id: str = Field(alias="requestId", description="Correlation id for support")
    attempts: Optional[list[AttemptView]] = Field(
        default=None,
        description="Provider attempt trace (present only if debug enabled)",
    )


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(examples=["Server is running!"])
    timestamp: datetime = Field(default_factory=_utcnow)


class ProviderStatus(BaseModel):
    name: str
    priority: str
    configured: bool
    max_retries: int
    timeout_seconds: float
    model: str


class StatusResponse(BaseModel):
    """Response for the service status endpoint."""

    timestamp: datetime = Field(default_factory=_utcnow)
    providers: list[ProviderStatus]
    emergency_enabled: bool
    retry: dict[str, int]
    rate_limit: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(
        description="Error code",
        examples=["invalid_request", "rate_limited", "service_unavailable", "internal_error"],
    )
    message: str = Field(description="Human-readable error message")
    details: Optional[Any] = None
    timestamp: datetime = Field(default_factory=_utcnow)
