"""
Failover orchestration across the provider chain.

- chain: ProviderSpec and build_provider_chain (settings -> ordered chain)
- failover: FailoverOrchestrator (retry per provider, then emergency advice)
"""

from choosewise.orchestrator.chain import ProviderSpec, build_provider_chain
from choosewise.orchestrator.failover import FailoverOrchestrator

__all__ = [
    "ProviderSpec",
    "build_provider_chain",
    "FailoverOrchestrator",
]
