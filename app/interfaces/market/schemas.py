"""
Pydantic schemas for market API request/response validation.

These schemas enforce input validation and define the API contract.
Every successful response is wrapped in an envelope carrying
``success``, ``data`` and ``timestamp`` plus endpoint metadata.
No business logic belongs here.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, Field

SYMBOL_DESCRIPTION = "Stock ticker symbol, e.g. AAPL or BRK.B"
SYMBOL_PATTERN = r"^[A-Z0-9.-]{1,10}$"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Envelope(BaseModel):
    """Fields shared by every successful response."""

    success: bool = True
    timestamp: datetime = Field(default_factory=_utc_now)


# ------------------------------------------------------------------ #
# Quotes
# ------------------------------------------------------------------ #


class QuoteData(BaseModel):
    """Latest market quote."""

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


class QuoteErrorItem(BaseModel):
    """Placeholder returned for a symbol that failed in a batch lookup."""

    error: str


class QuoteResponse(Envelope):
    data: QuoteData


class MultiQuoteResponse(Envelope):
    """Batch quotes keyed by symbol; failed symbols carry an error message."""

    data: dict[str, Union[QuoteData, QuoteErrorItem]]
    symbols: list[str]


# ------------------------------------------------------------------ #
# History and indicators
# ------------------------------------------------------------------ #


class PricePointItem(BaseModel):
    """One day of OHLCV history. Missing provider values are null."""

    date: date
    open: Optional[float]
    high: Optional[float]
    low: Optional[float]
    close: Optional[float]
    volume: Optional[int]


class HistoryResponse(Envelope):
    data: list[PricePointItem]
    symbol: str
    outputsize: str


class MovingAverageItem(BaseModel):
    date: date
    value: float


class MovingAveragesData(BaseModel):
    """SMA and EMA series keyed by window length."""

    sma: dict[int, list[MovingAverageItem]]
    ema: dict[int, list[MovingAverageItem]]


class MovingAveragesResponse(Envelope):
    data: MovingAveragesData
    symbol: str
    periods: list[int]


# ------------------------------------------------------------------ #
# Fundamentals and search
# ------------------------------------------------------------------ #


class OverviewData(BaseModel):
    symbol: str
    name: str
    description: str
    sector: str
    industry: str
    market_cap: Optional[float]
    pe_ratio: Optional[float]


class OverviewResponse(Envelope):
    data: OverviewData
    symbol: str


class SymbolMatchItem(BaseModel):
    symbol: str
    name: str
    quote_type: str
    exchange: str


class SearchResponse(Envelope):
    data: list[SymbolMatchItem]
    keywords: str
    count: int


class EarningsItem(BaseModel):
    """One fiscal quarter of reported earnings per share.

    ``eps_change`` is the difference in basic EPS against the previous
    quarter in the response, or null for the oldest quarter.
    """

    start_date: Optional[date]
    end_date: Optional[date]
    fiscal_period: str
    fiscal_year: str
    basic_eps: Optional[float]
    diluted_eps: Optional[float]
    eps_change: Optional[float]


class EarningsData(BaseModel):
    symbol: str
    earnings: list[EarningsItem]


class EarningsResponse(Envelope):
    data: EarningsData


# ------------------------------------------------------------------ #
# Risk radar
# ------------------------------------------------------------------ #


class RiskArticleItem(BaseModel):
    title: str
    url: str
    source: str
    published_at: Optional[datetime]
    sentiment: str = Field(..., description="POSITIVE, NEGATIVE or NEUTRAL")
    description: Optional[str]


class RiskCategoryItem(BaseModel):
    """Counters and articles for one risk category."""

    total_count: int
    positive_count: int
    negative_count: int
    neutral_count: int
    articles: list[RiskArticleItem]


class RiskRadarResponse(Envelope):
    """Risk summaries keyed by category, in order of first appearance.

    Only categories observed in recent news are present; ``data`` is
    empty when no article qualified.
    """

    data: dict[str, RiskCategoryItem]
    symbol: str
    article_count: int


# ------------------------------------------------------------------ #
# Rate limit, health and errors
# ------------------------------------------------------------------ #


class RateLimitStatusData(BaseModel):
    limit: int
    window_ms: int
    remaining: int
    reset_at: Optional[int] = Field(
        None, description="Epoch milliseconds when capacity next frees up"
    )


class RateLimitStatusResponse(Envelope):
    data: RateLimitStatusData


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: Optional[str] = None
