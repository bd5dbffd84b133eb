"""
Domain-specific errors for the market bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Optional


class MarketDomainError(Exception):
    """Base error for all market domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(MarketDomainError):
    """Raised when a request parameter has an invalid shape."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class SymbolNotFoundError(MarketDomainError):
    """Raised when the data provider knows nothing about a symbol."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Symbol not found: {symbol}")
        self.symbol = symbol


class UpstreamError(MarketDomainError):
    """Raised when a data provider call fails or returns malformed data."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source} request failed: {reason}")
        self.source = source
        self.reason = reason


class MissingCredentialsError(MarketDomainError):
    """Raised when a provider is called without its API key configured."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"No API key configured for {provider}")
        self.provider = provider


class InferenceError(MarketDomainError):
    """Raised when a text-classification call fails."""

    def __init__(self, task: str, reason: str) -> None:
        super().__init__(f"{task} inference failed: {reason}")
        self.task = task
        self.reason = reason


class ExhaustedError(MarketDomainError):
    """Raised when a caller has used up its request budget."""

    def __init__(self, key: str, reset_at: Optional[int] = None) -> None:
        super().__init__(f"Rate limit exhausted for {key}")
        self.key = key
        self.reset_at = reset_at
