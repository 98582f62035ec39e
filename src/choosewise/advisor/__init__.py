"""
Network-free emergency advisor.

- emergency: Option extraction, keyword scoring and the fixed response template
"""

from choosewise.advisor.emergency import (
    GENERIC_FALLBACK_MESSAGE,
    extract_options,
    generate_emergency_advice,
    score_option,
)

__all__ = [
    "GENERIC_FALLBACK_MESSAGE",
    "extract_options",
    "generate_emergency_advice",
    "score_option",
]
