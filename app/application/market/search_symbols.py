"""
Use case: Free-text symbol search.

Input:  SearchSymbolsQuery (keywords)
Output: list[SymbolMatchResult]
"""

import logging

from app.application.market.dtos import SearchSymbolsQuery, SymbolMatchResult
from app.domain.market.errors import ValidationError
from app.domain.market.ports import MarketDataPort

logger = logging.getLogger(__name__)


class SearchSymbolsUseCase:
    """Looks up symbols whose name or ticker matches the keywords."""

    def __init__(self, market_data: MarketDataPort) -> None:
        self._market_data = market_data

    def execute(self, query: SearchSymbolsQuery) -> list[SymbolMatchResult]:
        keywords = query.keywords.strip()
        if not keywords:
            raise ValidationError("keywords", "must not be blank")

        matches = self._market_data.search(keywords)
        logger.info("Search %r returned %d matches", keywords, len(matches))
        return [
            SymbolMatchResult(
                symbol=m.symbol,
                name=m.name,
                quote_type=m.quote_type,
                exchange=m.exchange,
            )
            for m in matches
        ]
