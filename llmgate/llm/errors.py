"""
Gateway error taxonomy.

Provider-level errors describe why a single backend attempt failed. The
router recovers from all of them by moving down the fallback chain; only
ProviderNotFound and AllProvidersFailed reach the HTTP boundary.
"""

from __future__ import annotations

from typing import Optional


class GatewayError(Exception):
    """Base exception for gateway errors."""

    code: str = "gateway_error"


class ProviderError(GatewayError):
    """A single provider attempt failed."""

    code = "provider_error"

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class TransportFailure(ProviderError):
    """Connection, DNS or timeout failure reaching the backend."""

    code = "transport_failure"


class BackendRejected(ProviderError):
    """Backend answered with a non-success status."""

    code = "backend_rejected"

    def __init__(self, provider: str, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(provider, f"API error (status {status}): {body}")


class MalformedResponse(ProviderError):
    """Success status, but the body could not be parsed or has the wrong shape."""

    code = "malformed_response"


class NoUsableOutput(ProviderError):
    """Parsed response carried no extractable text."""

    code = "no_usable_output"


class ProviderNotFound(GatewayError):
    """No registered provider has the requested name."""

    code = "provider_not_found"

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Provider not found: {provider}")


class AllProvidersFailed(GatewayError):
    """Every provider in the chain failed, or none were registered.

    Only the last provider's error is kept; earlier failures are visible in
    the logs.
    """

    code = "all_providers_failed"

    def __init__(self, last_error: Optional[ProviderError] = None) -> None:
        self.last_error = last_error
        if last_error is None:
            message = "All providers failed"
        else:
            message = f"All providers failed. Last error: {last_error}"
        super().__init__(message)
