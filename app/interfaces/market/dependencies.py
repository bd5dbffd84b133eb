"""
Dependency injection for the market bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the market context.

Port providers are separate dependencies so tests can swap a single
adapter through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends, Request

from app.application.market.assess_risk import AssessRiskUseCase
from app.application.market.compute_indicators import ComputeIndicatorsUseCase
from app.application.market.get_company_overview import GetCompanyOverviewUseCase
from app.application.market.get_earnings import GetEarningsUseCase
from app.application.market.get_price_history import GetPriceHistoryUseCase
from app.application.market.get_quote import GetMultipleQuotesUseCase, GetQuoteUseCase
from app.application.market.get_rate_limit_status import GetRateLimitStatusUseCase
from app.application.market.search_symbols import SearchSymbolsUseCase
from app.core.config import settings
from app.domain.market.ports import (
    CategoryClassifierPort,
    EarningsPort,
    MarketDataPort,
    NewsPort,
    SentimentClassifierPort,
)
from app.domain.market.risk_radar import RiskSignalAggregator
from app.infrastructure.market.inference_adapters import (
    TransformersCategoryAdapter,
    TransformersSentimentAdapter,
)
from app.infrastructure.market.news_api_adapter import NewsApiAdapter
from app.infrastructure.market.polygon_earnings_adapter import PolygonEarningsAdapter
from app.infrastructure.market.yahoo_market_data_adapter import YahooMarketDataAdapter
from app.nlp.language import is_english_or_undetermined
from app.shared.security.rate_governor import RateGovernor

# ------------------------------------------------------------------ #
# Ports
# ------------------------------------------------------------------ #


def get_market_data() -> MarketDataPort:
    """Build the Yahoo Finance market data adapter."""
    return YahooMarketDataAdapter()


def get_news() -> NewsPort:
    """Build the NewsAPI adapter from application settings."""
    return NewsApiAdapter(
        api_key=settings.news_api_key,
        base_url=settings.news_api_url,
        timeout=settings.http_timeout_seconds,
    )


def get_earnings_port() -> EarningsPort:
    """Build the Polygon earnings adapter from application settings."""
    return PolygonEarningsAdapter(
        api_key=settings.polygon_api_key,
        base_url=settings.polygon_api_url,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_sentiment_classifier() -> SentimentClassifierPort:
    """Process-wide sentiment adapter; the model loads on first use."""
    return TransformersSentimentAdapter(model_name=settings.sentiment_model)


@lru_cache(maxsize=1)
def get_category_classifier() -> CategoryClassifierPort:
    """Process-wide zero-shot adapter; the model loads on first use."""
    return TransformersCategoryAdapter(model_name=settings.zero_shot_model)


def get_governor(request: Request) -> RateGovernor:
    """Return the governor installed on the running application."""
    return request.app.state.governor


# ------------------------------------------------------------------ #
# Use cases
# ------------------------------------------------------------------ #


def get_quote_use_case(
    market_data: MarketDataPort = Depends(get_market_data),
) -> GetQuoteUseCase:
    return GetQuoteUseCase(market_data=market_data)


def get_multiple_quotes_use_case(
    market_data: MarketDataPort = Depends(get_market_data),
) -> GetMultipleQuotesUseCase:
    return GetMultipleQuotesUseCase(market_data=market_data)


def get_price_history_use_case(
    market_data: MarketDataPort = Depends(get_market_data),
) -> GetPriceHistoryUseCase:
    return GetPriceHistoryUseCase(market_data=market_data)


def get_company_overview_use_case(
    market_data: MarketDataPort = Depends(get_market_data),
) -> GetCompanyOverviewUseCase:
    return GetCompanyOverviewUseCase(market_data=market_data)


def get_search_symbols_use_case(
    market_data: MarketDataPort = Depends(get_market_data),
) -> SearchSymbolsUseCase:
    return SearchSymbolsUseCase(market_data=market_data)


def get_compute_indicators_use_case(
    market_data: MarketDataPort = Depends(get_market_data),
) -> ComputeIndicatorsUseCase:
    return ComputeIndicatorsUseCase(market_data=market_data)


def get_earnings_use_case(
    earnings: EarningsPort = Depends(get_earnings_port),
) -> GetEarningsUseCase:
    return GetEarningsUseCase(earnings=earnings)


def get_assess_risk_use_case(
    market_data: MarketDataPort = Depends(get_market_data),
    news: NewsPort = Depends(get_news),
    category_classifier: CategoryClassifierPort = Depends(get_category_classifier),
    sentiment_classifier: SentimentClassifierPort = Depends(get_sentiment_classifier),
) -> AssessRiskUseCase:
    """Build AssessRiskUseCase around a configured RiskSignalAggregator."""
    aggregator = RiskSignalAggregator(
        market_data=market_data,
        news=news,
        category_classifier=category_classifier,
        sentiment_classifier=sentiment_classifier,
        categories=settings.risk_categories,
        sentiment_margin=settings.risk_sentiment_margin,
        lookback_days=settings.risk_lookback_days,
        article_limit=settings.risk_article_limit,
        content_chars=settings.risk_content_chars,
        article_timeout=settings.risk_article_timeout_seconds,
        max_concurrency=settings.risk_classification_concurrency,
        language_filter=is_english_or_undetermined,
    )
    return AssessRiskUseCase(aggregator=aggregator)


def get_rate_limit_status_use_case(
    governor: RateGovernor = Depends(get_governor),
) -> GetRateLimitStatusUseCase:
    return GetRateLimitStatusUseCase(governor=governor)
