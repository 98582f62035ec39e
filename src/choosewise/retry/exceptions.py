"""
Failover engine exceptions.

AllProvidersExhausted is an internal signal: the orchestrator normally
answers it with emergency advice. It only escapes when the emergency path is
disabled. ConfigurationError is a startup-time failure.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from choosewise.models.advice_models import RequestContext


class AllProvidersExhausted(Exception):
    """
    Raised when every configured provider failed for a request.

    Attributes:
        context: Request trace with every attempt made
        last_error: Final error from the last provider tried (None when no
            provider is configured)
    """

    def __init__(
        self,
        context: "RequestContext",
        last_error: Optional[BaseException] = None,
    ) -> None:
        self.context = context
        self.last_error = last_error

        providers = list(dict.fromkeys(a.provider for a in context.attempts))
        super().__init__(
            f"All providers exhausted after {len(context.attempts)} attempts. "
            f"Providers tried: {', '.join(providers) or 'none'}. "
            f"Final error: {type(last_error).__name__ if last_error else 'none'}"
        )


class ConfigurationError(Exception):
    """
    Raised at startup when the service cannot answer any request:
    no provider is configured and the emergency fallback is disabled, or the
    provider order names an unknown provider.
    """
    pass
