"""
Domain entities for the market bounded context.

Entities represent core business objects.
They contain no framework imports and no IO operations.
Everything here is request-scoped: built from provider data,
derived into indicators or summaries, and discarded.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional


class Sentiment(Enum):
    """Sentiment classification for a piece of news text."""

    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


class MovingAverageKind(Enum):
    """Smoothing algorithm used to build a moving-average series."""

    SMA = "sma"
    EMA = "ema"


class OutputSize(Enum):
    """Depth of price history requested by a caller."""

    COMPACT = "compact"
    FULL = "full"


@dataclass(frozen=True)
class HistoryRange:
    """Inclusive calendar range of daily price history to fetch."""

    start: date
    end: date

    @classmethod
    def trailing(cls, days: int, end: Optional[date] = None) -> "HistoryRange":
        """Range covering the last ``days`` calendar days up to ``end``."""
        end = end or date.today()
        return cls(start=end - timedelta(days=days), end=end)

    @classmethod
    def for_output_size(
        cls, output_size: OutputSize, end: Optional[date] = None
    ) -> "HistoryRange":
        """Compact is the last 100 days; full is the last 20 years."""
        end = end or date.today()
        if output_size is OutputSize.COMPACT:
            return cls.trailing(100, end)
        return cls.trailing_years(20, end)

    @classmethod
    def trailing_years(cls, years: int, end: Optional[date] = None) -> "HistoryRange":
        """Range covering the last ``years`` years up to ``end``."""
        end = end or date.today()
        try:
            start = end.replace(year=end.year - years)
        except ValueError:
            # Feb 29 in a non-leap target year
            start = end.replace(year=end.year - years, day=28)
        return cls(start=start, end=end)

    @property
    def is_long(self) -> bool:
        return (self.end - self.start).days > 366 * 5


@dataclass(frozen=True)
class PricePoint:
    """A single trading day's OHLCV record.

    Providers occasionally omit fields; missing values are ``None``.
    """

    date: date
    open: Optional[float]
    high: Optional[float]
    low: Optional[float]
    close: Optional[float]
    volume: Optional[int]


@dataclass(frozen=True)
class MovingAveragePoint:
    """One value of a moving-average series."""

    date: date
    value: float
    kind: MovingAverageKind
    window: int


@dataclass(frozen=True)
class Quote:
    """Latest market quote for a symbol."""

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
class CompanyOverview:
    """Descriptive fundamentals for a listed company."""

    symbol: str
    name: str
    description: str
    sector: str
    industry: str
    market_cap: Optional[float]
    pe_ratio: Optional[float]


@dataclass(frozen=True)
class SymbolMatch:
    """A search hit from the provider's symbol lookup."""

    symbol: str
    name: str
    quote_type: str
    exchange: str


@dataclass(frozen=True)
class EarningsReport:
    """Reported earnings per share for one fiscal period."""

    start_date: Optional[date]
    end_date: Optional[date]
    fiscal_period: str
    fiscal_year: str
    basic_eps: Optional[float]
    diluted_eps: Optional[float]


@dataclass(frozen=True)
class NewsArticle:
    """A news article returned by the news provider."""

    title: str
    url: str
    source: str
    published_at: Optional[datetime]
    content: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class SentimentResult:
    """Output of a single sentiment classification."""

    label: Sentiment
    confidence: float


@dataclass(frozen=True)
class CategoryResult:
    """Output of a zero-shot classification, labels ranked best-first."""

    labels: list[str]
    scores: list[float]

    @property
    def top_label(self) -> str:
        return self.labels[0]

    @property
    def top_score(self) -> float:
        return self.scores[0] if self.scores else 0.0


@dataclass(frozen=True)
class ClassificationOutcome:
    """Category and fused sentiment for a single article."""

    category: str
    category_confidence: float
    sentiment: Sentiment
    sentiment_confidence: float


@dataclass(frozen=True)
class ArticleRecord:
    """Lightweight article reference kept in a risk summary."""

    title: str
    url: str
    source: str
    published_at: Optional[datetime]
    sentiment: Sentiment
    description: Optional[str]


@dataclass
class RiskCategorySummary:
    """Counters and representative articles for one risk category."""

    category: str
    total_count: int = 0
    positive_count: int = 0
    negative_count: int = 0
    neutral_count: int = 0
    articles: list[ArticleRecord] = field(default_factory=list)

    def add(self, record: ArticleRecord) -> None:
        """Count an article under its sentiment and keep its record."""
        self.total_count += 1
        if record.sentiment is Sentiment.POSITIVE:
            self.positive_count += 1
        elif record.sentiment is Sentiment.NEGATIVE:
            self.negative_count += 1
        else:
            self.neutral_count += 1
        self.articles.append(record)


@dataclass(frozen=True)
class RateDecision:
    """Admission decision from the rate governor.

    ``reset_at`` is an epoch timestamp in milliseconds, or ``None``
    when the caller has no recorded requests.
    """

    allowed: bool
    remaining: int
    reset_at: Optional[int]
