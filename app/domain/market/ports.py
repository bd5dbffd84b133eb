"""
Port interfaces (ABCs) for the market bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import date

from app.domain.market.entities import (
    CategoryResult,
    CompanyOverview,
    EarningsReport,
    HistoryRange,
    NewsArticle,
    PricePoint,
    Quote,
    SentimentResult,
    SymbolMatch,
)


class MarketDataPort(ABC):
    """Port for quotes, price history and company fundamentals.

    Implementations are synchronous; async callers must run them
    off the event loop.
    """

    @abstractmethod
    def get_quote(self, symbol: str) -> Quote:
        """Return the latest quote for a symbol.

        Raises:
            SymbolNotFoundError: If the provider does not know the symbol.
            UpstreamError: If the provider call fails.
        """
        raise NotImplementedError

    @abstractmethod
    def get_price_history(
        self, symbol: str, history_range: HistoryRange
    ) -> list[PricePoint]:
        """Return daily OHLCV history ordered by date ascending."""
        raise NotImplementedError

    @abstractmethod
    def get_company_overview(self, symbol: str) -> CompanyOverview:
        """Return descriptive fundamentals, including the display name."""
        raise NotImplementedError

    @abstractmethod
    def search(self, keywords: str) -> list[SymbolMatch]:
        """Return symbols matching free-text keywords."""
        raise NotImplementedError


class NewsPort(ABC):
    """Port for fetching recent news articles."""

    @abstractmethod
    def ensure_configured(self) -> None:
        """Raise MissingCredentialsError if the provider cannot be called."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_recent(self, query: str, since: date) -> list[NewsArticle]:
        """Return relevance-sorted articles matching the query since a date.

        Raises:
            UpstreamError: If the provider call fails or responds with
                a non-success status.
        """
        raise NotImplementedError


class CategoryClassifierPort(ABC):
    """Port for zero-shot topic classification."""

    @abstractmethod
    async def classify(self, text: str, labels: list[str]) -> CategoryResult:
        """Rank the candidate labels for a text, best first.

        Raises:
            InferenceError: If inference fails.
        """
        raise NotImplementedError

    def warm_up(self) -> None:
        """Load model weights ahead of the first call. No-op by default."""


class SentimentClassifierPort(ABC):
    """Port for sentiment classification."""

    @abstractmethod
    async def classify(self, text: str) -> SentimentResult:
        """Return the sentiment label and confidence for a text.

        Raises:
            InferenceError: If inference fails or yields an unknown label.
        """
        raise NotImplementedError

    def warm_up(self) -> None:
        """Load model weights ahead of the first call. No-op by default."""


class EarningsPort(ABC):
    """Port for reported quarterly earnings."""

    @abstractmethod
    def get_earnings(self, symbol: str, limit: int = 8) -> list[EarningsReport]:
        """Return the most recent earnings reports, newest first.

        Raises:
            MissingCredentialsError: If no API key is configured.
            UpstreamError: If the provider call fails.
        """
        raise NotImplementedError
