"""Application error types."""

from typing import Optional


class AppError(Exception):
    """Base class for errors raised by the service layer."""


# ── AI providers ─────────────────────────────────────────────────────────────

class ProviderError(AppError):
    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class ProviderAuthError(ProviderError):
    """401/403 from a provider. The provider is disabled until restart."""


class ProviderTransientError(ProviderError):
    """Timeouts, connection failures, rate limits and 5xx. Retried."""


class ProviderRequestError(ProviderError):
    """Any other 4xx: the request itself was rejected. Not retried; the next provider is tried."""


# ── Content generation ───────────────────────────────────────────────────────

class GenerationError(AppError):
    pass


class GenerationParseError(GenerationError):
    """The model response held no usable JSON object."""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response


# ── Lookup / input ───────────────────────────────────────────────────────────

class NotFoundError(AppError):
    pass


class ValidationError(AppError):
    pass
