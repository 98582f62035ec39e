"""
Data models for the Choose-Wise Advice Service.

- enums: Attempt outcomes, provider priority labels
- advice_models: DecisionRequest, AttemptRecord, RequestContext, AdviceResult
"""

from choosewise.models.advice_models import (
    AdviceResult,
    AttemptRecord,
    DecisionRequest,
    RequestContext,
    new_request_id,
)
from choosewise.models.enums import (
    EMERGENCY_SERVED_BY,
    AttemptOutcome,
    ProviderPriority,
)

__all__ = [
    "AdviceResult",
    "AttemptRecord",
    "DecisionRequest",
    "RequestContext",
    "new_request_id",
    "AttemptOutcome",
    "ProviderPriority",
    "EMERGENCY_SERVED_BY",
]
