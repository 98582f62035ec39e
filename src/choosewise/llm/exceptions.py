"""
Custom exceptions for the provider adapter layer.

These exceptions classify provider failures so the retry executor can decide
whether another attempt makes sense, without knowing anything about the
provider's wire format.
"""

from typing import Optional


class ProviderError(Exception):
    """
    Base exception for all provider adapter errors.

    All provider-specific exceptions inherit from this to allow catching
    any provider failure with a single except clause.

    Attributes:
        message: Human-readable description
        provider: Provider name (e.g. "claude")
        status_code: HTTP status returned by the provider, if any
        details: Extra structured context for logs
        retryable: Whether the retry executor may try the same provider again
    """

    retryable: bool = True

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.details = details or {}

    @property
    def kind(self) -> str:
        return type(self).__name__


class ProviderAuthError(ProviderError):
    """
    Raised when the credential is missing or rejected (HTTP 401/403).

    Credentials do not become valid by retrying, so this ends the provider's
    turn after one attempt.
    """

    retryable = False


class ProviderRateLimitError(ProviderError):
    """
    Raised on HTTP 429 or a quota-exhaustion signal.

    The Retry-After header, when present, is kept in details["retry_after"].
    """
    pass


class ProviderTransientError(ProviderError):
    """
    Raised for network errors, connection resets and HTTP 5xx responses.
    """
    pass


class ProviderTimeoutError(ProviderTransientError):
    """
    Raised when a call exceeds the per-call timeout ceiling.

    Counts as one failed attempt; the timeout never extends the retry budget.
    """
    pass


class ProviderInvalidResponseError(ProviderError):
    """
    Raised when the provider answers 2xx but the expected text field is
    missing, empty or the body is not JSON.

    Treated like a transient failure.
    """
    pass


class ProviderRequestError(ProviderError):
    """
    Raised for other 4xx responses (malformed request, unknown model).

    Retried like any other non-auth failure; only credentials end a
    provider's turn early.
    """
    pass
