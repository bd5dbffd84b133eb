"""
Data Transfer Objects for the market application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class SymbolQuery:
    """Input DTO for any single-symbol lookup.

    Attributes:
        symbol: Ticker symbol, e.g. ``AAPL``.
    """

    symbol: str


@dataclass(frozen=True)
class QuoteResult:
    """Output DTO for a market quote."""

    symbol: str
    open: float
    high: float
    low: float
    price: float
    volume: int
    latest_trading_day: Optional[date]
    previous_close: float
    change: float
    change_percent: float


@dataclass(frozen=True)
class GetQuotesQuery:
    """Input DTO for a multi-symbol quote lookup.

    Attributes:
        symbols: Ticker symbols in the order the caller gave them.
    """

    symbols: tuple[str, ...]


@dataclass(frozen=True)
class MultiQuoteResult:
    """Output DTO for a multi-symbol quote lookup.

    Attributes:
        symbols: Requested symbols, in request order.
        quotes: Quotes for the symbols that resolved.
        errors: Error message per symbol that failed.
    """

    symbols: tuple[str, ...]
    quotes: dict[str, QuoteResult] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GetHistoryQuery:
    """Input DTO for daily price history.

    Attributes:
        symbol: Ticker symbol.
        output_size: ``compact`` (last 100 days) or ``full`` (20 years).
    """

    symbol: str
    output_size: str = "compact"


@dataclass(frozen=True)
class PricePointResult:
    """Output DTO for one day of OHLCV history."""

    date: date
    open: Optional[float]
    high: Optional[float]
    low: Optional[float]
    close: Optional[float]
    volume: Optional[int]


@dataclass(frozen=True)
class HistoryResult:
    """Output DTO for daily price history."""

    symbol: str
    output_size: str
    points: list[PricePointResult]


@dataclass(frozen=True)
class OverviewResult:
    """Output DTO for a company overview."""

    symbol: str
    name: str
    description: str
    sector: str
    industry: str
    market_cap: Optional[float]
    pe_ratio: Optional[float]


@dataclass(frozen=True)
class SearchSymbolsQuery:
    """Input DTO for a free-text symbol search."""

    keywords: str


@dataclass(frozen=True)
class SymbolMatchResult:
    """Output DTO for a single search hit."""

    symbol: str
    name: str
    quote_type: str
    exchange: str


@dataclass(frozen=True)
class ComputeIndicatorsCommand:
    """Input DTO for moving-average indicators.

    Attributes:
        symbol: Ticker symbol.
        periods: Window lengths, each >= 1.
    """

    symbol: str
    periods: tuple[int, ...]


@dataclass(frozen=True)
class MovingAveragePointResult:
    """Output DTO for one moving-average value."""

    date: date
    value: float


@dataclass(frozen=True)
class IndicatorsResult:
    """Output DTO for moving-average indicators.

    Attributes:
        symbol: Ticker symbol.
        periods: Window lengths computed, ascending.
        sma: SMA series per window length.
        ema: EMA series per window length.
    """

    symbol: str
    periods: tuple[int, ...]
    sma: dict[int, list[MovingAveragePointResult]]
    ema: dict[int, list[MovingAveragePointResult]]


@dataclass(frozen=True)
class GetEarningsQuery:
    """Input DTO for reported earnings.

    Attributes:
        symbol: Ticker symbol.
        limit: Number of quarters to return.
    """

    symbol: str
    limit: int = 8


@dataclass(frozen=True)
class EarningsItemResult:
    """Output DTO for one fiscal quarter's earnings."""

    start_date: Optional[date]
    end_date: Optional[date]
    fiscal_period: str
    fiscal_year: str
    basic_eps: Optional[float]
    diluted_eps: Optional[float]
    eps_change: Optional[float]


@dataclass(frozen=True)
class EarningsResult:
    """Output DTO for reported earnings, newest first."""

    symbol: str
    earnings: list[EarningsItemResult]


@dataclass(frozen=True)
class RiskArticleResult:
    """Output DTO for an article listed under a risk category."""

    title: str
    url: str
    source: str
    published_at: Optional[datetime]
    sentiment: str
    description: Optional[str]


@dataclass(frozen=True)
class RiskCategoryResult:
    """Output DTO for one risk category's counters and articles."""

    category: str
    total_count: int
    positive_count: int
    negative_count: int
    neutral_count: int
    articles: list[RiskArticleResult]


@dataclass(frozen=True)
class RiskRadarResult:
    """Output DTO for the risk radar of a symbol.

    Attributes:
        symbol: Ticker symbol.
        article_count: Articles that made it into the summary.
        categories: Summaries keyed by category label, in order of
            first appearance.
    """

    symbol: str
    article_count: int
    categories: dict[str, RiskCategoryResult]


@dataclass(frozen=True)
class RateLimitStatusQuery:
    """Input DTO for a caller's rate-limit budget."""

    client_key: Optional[str]


@dataclass(frozen=True)
class RateLimitStatusResult:
    """Output DTO describing a caller's remaining rate-limit budget.

    Attributes:
        limit: Requests allowed per window.
        window_ms: Window length in milliseconds.
        remaining: Requests left in the current window.
        reset_at: Epoch milliseconds when the oldest request leaves the
            window, or None if the caller has no recorded requests.
    """

    limit: int
    window_ms: int
    remaining: int
    reset_at: Optional[int]
