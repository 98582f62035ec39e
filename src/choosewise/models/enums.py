"""
Enumerations for Choose-Wise data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class AttemptOutcome(str, Enum):
    """
    Outcome of a single provider attempt.

    RETRYABLE_FAILURE attempts may be followed by another attempt against the
    same provider; FATAL_FAILURE ends that provider's turn immediately.
    """

    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable_failure"
    FATAL_FAILURE = "fatal_failure"


class ProviderPriority(str, Enum):
    """Position of a provider in the failover chain."""

    PRIMARY = "primary"
    FALLBACK = "fallback"

    @classmethod
    def for_position(cls, position: int) -> str:
        """Label for a 0-based chain position ("primary", "fallback-1", ...)."""
        if position == 0:
            return cls.PRIMARY.value
        return f"{cls.FALLBACK.value}-{position}"


# served_by tag for answers produced locally when every provider failed
EMERGENCY_SERVED_BY = "emergency"
