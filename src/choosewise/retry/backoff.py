"""
Exponential backoff with jitter.

Delay before attempt k (k >= 1), in milliseconds:

    base * 2 ** (k - 1) + uniform(0, jitter_max)

The random addend spreads out retries of concurrent requests that failed at
the same moment against the same provider.
"""

import random
from dataclasses import dataclass
from typing import Callable

from choosewise.config import Settings

JitterSource = Callable[[float, float], float]


@dataclass(frozen=True)
class BackoffPolicy:
    """
    Backoff parameters, read once from settings.

    Attributes:
        base_delay_ms: Delay before the first retry, without jitter
        jitter_max_ms: Upper bound of the random addend
    """

    base_delay_ms: int = 1000
    jitter_max_ms: int = 1000

    def __post_init__(self) -> None:
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")
        if self.jitter_max_ms < 0:
            raise ValueError("jitter_max_ms must be >= 0")

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackoffPolicy":
        return cls(
            base_delay_ms=settings.RETRY_BASE_DELAY_MS,
            jitter_max_ms=settings.RETRY_JITTER_MAX_MS,
        )

    def bounds_ms(self, attempt: int) -> tuple[float, float]:
        """Inclusive [min, max] delay before a 1-indexed retry attempt."""
        if attempt < 1:
            raise ValueError("attempt must be >= 1 (attempt 0 never waits)")
        exponential = self.base_delay_ms * 2 ** (attempt - 1)
        return float(exponential), float(exponential + self.jitter_max_ms)

    def delay_ms(self, attempt: int, jitter_source: JitterSource = random.uniform) -> float:
        """Delay before retry `attempt`, jitter drawn from jitter_source(0, jitter_max)."""
        low, _ = self.bounds_ms(attempt)
        return low + jitter_source(0, self.jitter_max_ms)
