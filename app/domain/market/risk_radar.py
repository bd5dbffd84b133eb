"""
Domain service: Risk radar aggregation.

Turns recent news about a company into a per-category risk summary:

    resolve display name ──▶ fetch news ──▶ filter ──▶ classify (fan-out)
                                                          │
                              per-category summary ◀── fold ◀┘

Each article is classified by topic (zero-shot over a closed label set)
and by sentiment (title and body, fused). Articles whose classification
fails are logged and left out; they never abort the whole assessment.
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Callable, Optional, Sequence, Union

from app.domain.market.entities import (
    ArticleRecord,
    CategoryResult,
    ClassificationOutcome,
    NewsArticle,
    RiskCategorySummary,
    Sentiment,
    SentimentResult,
)
from app.domain.market.errors import InferenceError, MarketDomainError
from app.domain.market.ports import (
    CategoryClassifierPort,
    MarketDataPort,
    NewsPort,
    SentimentClassifierPort,
)

logger = logging.getLogger(__name__)

DEFAULT_RISK_CATEGORIES: tuple[str, ...] = (
    "Mergers & Acquisitions",
    "Earnings Guidance",
    "New Product Launch",
    "Analyst Rating Change",
    "Legal & Regulatory Issues",
    "Executive Leadership Changes",
    "Market Trends & Competition",
)

DEFAULT_SENTIMENT_MARGIN = 1.5
DEFAULT_LOOKBACK_DAYS = 7
DEFAULT_ARTICLE_LIMIT = 20
DEFAULT_CONTENT_CHARS = 500

# NewsAPI replaces takedowns with this placeholder article.
REMOVED_PLACEHOLDER = "[Removed]"

# Stands in for the body sentiment when an article has no usable content.
NEUTRAL_PLACEHOLDER = SentimentResult(label=Sentiment.NEUTRAL, confidence=1.0)

LanguageFilter = Callable[[str], bool]
ArticleOutcome = Union[ClassificationOutcome, BaseException]


def fuse_sentiment(
    title: SentimentResult,
    content: SentimentResult,
    margin: float = DEFAULT_SENTIMENT_MARGIN,
) -> SentimentResult:
    """Combine headline and body sentiment, favouring the headline.

    The body only wins when its confidence beats the headline's by
    more than ``margin`` times.
    """
    if content.confidence > title.confidence * margin:
        return content
    return title


def _has_text(text: Optional[str]) -> bool:
    return bool(text and text.strip())


def classification_text(article: NewsArticle) -> str:
    """Title followed by the content, or the description when content is blank."""
    body = article.content if _has_text(article.content) else article.description
    if not _has_text(body):
        return article.title
    return f"{article.title} {body}"


def build_news_query(display_name: str, subject: str) -> str:
    """Search for either the company name or the raw symbol."""
    if not display_name or display_name.strip().upper() == subject.strip().upper():
        return subject
    return f'"{display_name}" OR {subject}'


class RiskSignalAggregator:
    """Domain service producing the risk radar for a single symbol.

    Args:
        market_data: Used only to resolve the company display name.
        news: News provider.
        category_classifier: Zero-shot topic classifier.
        sentiment_classifier: Sentiment classifier.
        categories: Closed set of candidate risk categories.
        sentiment_margin: Body-over-title confidence ratio needed for
            the body sentiment to win.
        lookback_days: How far back to search for news.
        article_limit: Maximum number of articles classified per call.
        content_chars: Body prefix length fed to the sentiment classifier.
        article_timeout: Seconds allowed per article; ``None`` disables it.
        max_concurrency: Articles classified at once; 0 means no cap.
        language_filter: Predicate on the title; articles failing it are
            dropped before classification.
        today: Date provider, injectable for tests.
    """

    def __init__(
        self,
        market_data: MarketDataPort,
        news: NewsPort,
        category_classifier: CategoryClassifierPort,
        sentiment_classifier: SentimentClassifierPort,
        categories: Sequence[str] = DEFAULT_RISK_CATEGORIES,
        sentiment_margin: float = DEFAULT_SENTIMENT_MARGIN,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        article_limit: int = DEFAULT_ARTICLE_LIMIT,
        content_chars: int = DEFAULT_CONTENT_CHARS,
        article_timeout: Optional[float] = None,
        max_concurrency: int = 0,
        language_filter: Optional[LanguageFilter] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        if not categories:
            raise ValueError("categories must not be empty.")
        self._market_data = market_data
        self._news = news
        self._category_classifier = category_classifier
        self._sentiment_classifier = sentiment_classifier
        self._categories = list(categories)
        self._sentiment_margin = sentiment_margin
        self._lookback_days = lookback_days
        self._article_limit = article_limit
        self._content_chars = content_chars
        self._article_timeout = article_timeout
        self._max_concurrency = max_concurrency
        self._language_filter = language_filter
        self._today = today

    async def assess(self, subject: str) -> dict[str, RiskCategorySummary]:
        """Build the per-category risk summary for a symbol.

        Args:
            subject: Ticker symbol.

        Returns:
            Mapping from category label to its summary. Only categories
            observed in this call appear; empty when no article qualified
            or every classification failed.

        Raises:
            MissingCredentialsError: If the news provider is not configured.
            UpstreamError: If the news fetch fails.
        """
        self._news.ensure_configured()

        display_name = await self._resolve_display_name(subject)
        query = build_news_query(display_name, subject)
        since = self._today() - timedelta(days=self._lookback_days)

        fetched = await self._news.fetch_recent(query, since)
        articles = self._select_articles(fetched)
        logger.info(
            "Risk radar for %s: %d fetched, %d selected (query=%s)",
            subject,
            len(fetched),
            len(articles),
            query,
        )
        if not articles:
            return {}

        outcomes = await self._classify_all(articles)
        summaries = self._fold(articles, outcomes)

        if not summaries:
            logger.warning(
                "Risk radar for %s: all %d articles failed classification",
                subject,
                len(articles),
            )
        return summaries

    # ------------------------------------------------------------------ #
    # Pipeline stages
    # ------------------------------------------------------------------ #

    async def _resolve_display_name(self, subject: str) -> str:
        try:
            overview = await asyncio.to_thread(
                self._market_data.get_company_overview, subject
            )
        except MarketDomainError as exc:
            logger.warning(
                "Could not resolve company name for %s, using symbol: %s",
                subject,
                exc,
            )
            return subject
        return overview.name or subject

    def _select_articles(self, articles: list[NewsArticle]) -> list[NewsArticle]:
        selected: list[NewsArticle] = []
        for article in articles:
            if len(selected) >= self._article_limit:
                break
            if not article.title or article.title == REMOVED_PLACEHOLDER:
                continue
            if self._language_filter and not self._language_filter(article.title):
                logger.debug("Skipping non-English article: %s", article.title)
                continue
            selected.append(article)
        return selected

    async def _classify_all(self, articles: list[NewsArticle]) -> list[ArticleOutcome]:
        """Classify every article concurrently and collect every outcome.

        Failures come back as exception objects in the article's slot;
        no failure cancels the other articles.
        """
        semaphore = (
            asyncio.Semaphore(self._max_concurrency)
            if self._max_concurrency > 0
            else None
        )

        async def run(article: NewsArticle) -> ClassificationOutcome:
            if semaphore is None:
                return await self._classify_with_timeout(article)
            async with semaphore:
                return await self._classify_with_timeout(article)

        return await asyncio.gather(
            *(run(article) for article in articles), return_exceptions=True
        )

    async def _classify_with_timeout(self, article: NewsArticle) -> ClassificationOutcome:
        if self._article_timeout is None:
            return await self.classify_article(article)
        return await asyncio.wait_for(
            self.classify_article(article), timeout=self._article_timeout
        )

    async def classify_article(self, article: NewsArticle) -> ClassificationOutcome:
        """Run category and sentiment inference for one article concurrently.

        Raises:
            InferenceError: If any inference call fails.
        """
        calls = [
            self._category_classifier.classify(
                classification_text(article), self._categories
            ),
            self._sentiment_classifier.classify(article.title),
        ]
        body = (article.content or "")[: self._content_chars]
        if _has_text(body):
            calls.append(self._sentiment_classifier.classify(body))

        results = await asyncio.gather(*calls, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result

        category: CategoryResult = results[0]
        title_sentiment: SentimentResult = results[1]
        content_sentiment: SentimentResult = (
            results[2] if len(results) > 2 else NEUTRAL_PLACEHOLDER
        )

        if not category.labels:
            raise InferenceError("zero-shot-classification", "no labels returned")

        fused = fuse_sentiment(
            title_sentiment, content_sentiment, self._sentiment_margin
        )
        return ClassificationOutcome(
            category=category.top_label,
            category_confidence=category.top_score,
            sentiment=fused.label,
            sentiment_confidence=fused.confidence,
        )

    def _fold(
        self, articles: list[NewsArticle], outcomes: list[ArticleOutcome]
    ) -> dict[str, RiskCategorySummary]:
        summaries: dict[str, RiskCategorySummary] = {}
        for article, outcome in zip(articles, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(
                    "Dropping article %r (%s) from risk radar: %s: %s",
                    article.title,
                    article.url,
                    type(outcome).__name__,
                    outcome,
                )
                continue

            summary = summaries.setdefault(
                outcome.category, RiskCategorySummary(category=outcome.category)
            )
            summary.add(
                ArticleRecord(
                    title=article.title,
                    url=article.url,
                    source=article.source,
                    published_at=article.published_at,
                    sentiment=outcome.sentiment,
                    description=article.description,
                )
            )
        return summaries
