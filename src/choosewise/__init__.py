"""
Choose-Wise Advice Service.

Turns a decision-support prompt into generated advice by routing it through
an ordered chain of text-generation providers:
- Claude (primary), Gemini and OpenAI (fallbacks)
- Bounded retry with exponential backoff and jitter per provider
- Deterministic local emergency advice when every provider is unavailable

Architecture: FastAPI front + failover orchestrator + httpx provider adapters
"""

__version__ = "0.1.0"
