"""
Local emergency advice when every provider is unavailable.

Pure functions, no I/O, no randomness: the same prompt always yields the
same text, so answers can be compared byte for byte in tests.

Prompts follow the frontend convention of one bolded marker per option:

    **Option 1: Take the stable job**
    **Option 2: Pursue risky growth opportunity**
"""

import re
from typing import Optional

OPTION_PATTERN = re.compile(r"\*\*Option \d+: (.*?)\*\*")

# Keyword classes scored against each option label (case-insensitive
# substring match, every matching keyword counts)
GROWTH_KEYWORDS = ("better", "growth", "opportunity", "improvement")
STABILITY_KEYWORDS = ("stable", "secure", "comfortable")
RISK_KEYWORDS = ("risky", "uncertain", "difficult")

GROWTH_WEIGHT = 2
STABILITY_WEIGHT = 1
RISK_WEIGHT = -1

GENERIC_FALLBACK_MESSAGE = (
    "I understand you're facing a difficult decision. While I'm experiencing "
    "high demand right now, here's some general guidance: take time to reflect "
    "on your values, consider the long-term implications of each choice, and "
    "perhaps discuss with trusted friends or advisors. I'll be back to full "
    "capacity shortly to provide more detailed analysis."
)

DEFAULT_REASONING = "This appears to be a solid choice based on the information provided."
STRONG_REASONING = "This option shows strong potential for positive outcomes and growth."
STABLE_REASONING = "This appears to be a stable and sensible choice."

RESPONSE_TEMPLATE = """**My Recommendation: {recommendation}**

{reasoning}

While I'm currently operating in simplified mode due to high demand, this recommendation is based on analyzing the key factors you've mentioned.

**Why this choice makes sense:**
• It aligns with generally sound decision-making principles
• The information you provided suggests this has favorable characteristics
• It appears to balance opportunity with practical considerations

**Next steps:**
1. Reflect on how this recommendation feels to you
2. Consider any additional factors I might not have full context on
3. Trust your instincts - they often know more than we realize

I'll be back to full analytical capacity shortly to provide more comprehensive guidance if needed."""


def extract_options(prompt: str) -> list[str]:
    """
    Return option labels in prompt order.

    Examples:
        >>> extract_options("**Option 1: Stay** or **Option 2: Move**")
        ['Stay', 'Move']
        >>> extract_options("no markers")
        []
    """
    return OPTION_PATTERN.findall(prompt)


def score_option(label: str) -> int:
    """
    Heuristic desirability score for one option label.

    Examples:
        >>> score_option("Take the stable job")
        1
        >>> score_option("Pursue risky growth opportunity")
        3
    """
    text = label.lower()
    score = 0
    score += GROWTH_WEIGHT * sum(1 for word in GROWTH_KEYWORDS if word in text)
    score += STABILITY_WEIGHT * sum(1 for word in STABILITY_KEYWORDS if word in text)
    score += RISK_WEIGHT * sum(1 for word in RISK_KEYWORDS if word in text)
    return score


def choose_recommendation(options: list[str]) -> tuple[str, Optional[int]]:
    """
    Pick the recommended option.

    The first option is the default. Scanning in order, every option with a
    strictly positive score replaces the current pick, so the last
    positive-scoring option wins (not the highest-scoring one).

    Returns:
        Tuple of (label, score of the winning option or None if no option
        scored above zero)
    """
    recommendation = options[0]
    winning_score: Optional[int] = None
    for option in options:
        score = score_option(option)
        if score > 0:
            recommendation = option
            winning_score = score
    return recommendation, winning_score


def reasoning_for(score: Optional[int]) -> str:
    if score is None:
        return DEFAULT_REASONING
    return STRONG_REASONING if score > 1 else STABLE_REASONING


def generate_emergency_advice(prompt: str) -> str:
    """
    Build best-effort advice from the raw prompt text.

    Args:
        prompt: User prompt as received by the service

    Returns:
        GENERIC_FALLBACK_MESSAGE when fewer than two options are marked,
        otherwise a structured recommendation. Never empty.
    """
    options = extract_options(prompt)
    if len(options) < 2:
        return GENERIC_FALLBACK_MESSAGE

    recommendation, score = choose_recommendation(options)
    return RESPONSE_TEMPLATE.format(
        recommendation=recommendation,
        reasoning=reasoning_for(score),
    )
