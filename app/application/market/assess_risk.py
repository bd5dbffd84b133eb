"""
Use case: Build the news risk radar for a symbol.

Thin async wrapper around RiskSignalAggregator that converts the
domain summaries into output DTOs.

Input:  SymbolQuery
Output: RiskRadarResult
"""

import logging

from app.application.market.dtos import (
    RiskArticleResult,
    RiskCategoryResult,
    RiskRadarResult,
    SymbolQuery,
)
from app.domain.market.entities import RiskCategorySummary
from app.domain.market.risk_radar import RiskSignalAggregator

logger = logging.getLogger(__name__)


def _to_category(summary: RiskCategorySummary) -> RiskCategoryResult:
    return RiskCategoryResult(
        category=summary.category,
        total_count=summary.total_count,
        positive_count=summary.positive_count,
        negative_count=summary.negative_count,
        neutral_count=summary.neutral_count,
        articles=[
            RiskArticleResult(
                title=a.title,
                url=a.url,
                source=a.source,
                published_at=a.published_at,
                sentiment=a.sentiment.value,
                description=a.description,
            )
            for a in summary.articles
        ],
    )


class AssessRiskUseCase:
    """Runs the risk radar aggregation for one symbol."""

    def __init__(self, aggregator: RiskSignalAggregator) -> None:
        self._aggregator = aggregator

    async def execute(self, query: SymbolQuery) -> RiskRadarResult:
        summaries = await self._aggregator.assess(query.symbol)
        categories = {name: _to_category(s) for name, s in summaries.items()}
        article_count = sum(c.total_count for c in categories.values())
        logger.info(
            "Risk radar for %s: %d articles across %d categories",
            query.symbol,
            article_count,
            len(categories),
        )
        return RiskRadarResult(
            symbol=query.symbol,
            article_count=article_count,
            categories=categories,
        )
