"""
Core data models for the advice request lifecycle.

DecisionRequest and AdviceResult are pydantic models shared with the API
layer. AttemptRecord and RequestContext are plain dataclasses: they live
only for the duration of one request and are never serialized to clients
except as part of the debug trace.
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from choosewise.models.enums import AttemptOutcome


class DecisionRequest(BaseModel):
    """
    Sanitized request handed to the failover orchestrator.

    Trimming and length bounds are enforced by the API request model before
    this object is built.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="User decision prompt (options, context)")
    system_prompt: str = Field(..., min_length=1, description="System instructions for the provider")


@dataclass(frozen=True)
class AttemptRecord:
    """
    One attempt against one provider (or the emergency advisor).

    Attributes:
        provider: Provider name (e.g. "claude") or "emergency"
        attempt_number: 1-indexed attempt number within the provider's turn
        outcome: success, retryable_failure or fatal_failure
        error_kind: Exception class name, or None on success
        status_code: Provider HTTP status when one was received
        elapsed_ms: Wall-clock duration of the attempt
    """

    provider: str
    attempt_number: int
    outcome: AttemptOutcome
    error_kind: Optional[str] = None
    status_code: Optional[int] = None
    elapsed_ms: int = 0

    def __post_init__(self) -> None:
        if self.attempt_number < 1:
            raise ValueError("attempt_number must be >= 1")
        if self.elapsed_ms < 0:
            raise ValueError("elapsed_ms must be >= 0")


def new_request_id() -> str:
    """Short random token for log correlation (not a security token)."""
    return uuid.uuid4().hex[:8]


@dataclass
class RequestContext:
    """Per-request trace, owned by the task handling the request."""

    request_id: str = field(default_factory=new_request_id)
    start_time: float = field(default_factory=time.monotonic)
    attempts: list[AttemptRecord] = field(default_factory=list)

    def record(self, attempt: AttemptRecord) -> None:
        self.attempts.append(attempt)

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.start_time) * 1000)

    def attempts_for(self, provider: str) -> list[AttemptRecord]:
        return [a for a in self.attempts if a.provider == provider]


class AdviceResult(BaseModel):
    """
    Final answer returned by the orchestrator.

    `text` is never empty; `served_by` is a provider name or "emergency".
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, description="Generated (or emergency) advice")
    served_by: str = Field(..., description="Provider that produced the text, or 'emergency'")
    request_id: str = Field(..., description="Correlation id of the request")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Completion timestamp (UTC)"
    )
    attempts: list[AttemptRecord] = Field(
        default_factory=list,
        description="Ordered trace of provider attempts"
    )
