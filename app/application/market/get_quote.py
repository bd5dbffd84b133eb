"""
Use case: Get the latest quote for one or several symbols.

Input:  SymbolQuery / GetQuotesQuery
Output: QuoteResult / MultiQuoteResult
"""

import logging

from app.application.market.dtos import (
    GetQuotesQuery,
    MultiQuoteResult,
    QuoteResult,
    SymbolQuery,
)
from app.domain.market.entities import Quote
from app.domain.market.errors import MarketDomainError
from app.domain.market.ports import MarketDataPort

logger = logging.getLogger(__name__)


def _to_result(quote: Quote) -> QuoteResult:
    return QuoteResult(
        symbol=quote.symbol,
        open=quote.open,
        high=quote.high,
        low=quote.low,
        price=quote.price,
        volume=quote.volume,
        latest_trading_day=quote.latest_trading_day,
        previous_close=quote.previous_close,
        change=quote.change,
        change_percent=quote.change_percent,
    )


class GetQuoteUseCase:
    """Fetches the latest quote for a single symbol."""

    def __init__(self, market_data: MarketDataPort) -> None:
        self._market_data = market_data

    def execute(self, query: SymbolQuery) -> QuoteResult:
        """Return the latest quote.

        Raises:
            SymbolNotFoundError: If the provider has no price for the symbol.
            UpstreamError: If the provider call fails.
        """
        logger.info("Fetching quote for %s", query.symbol)
        return _to_result(self._market_data.get_quote(query.symbol))


class GetMultipleQuotesUseCase:
    """Fetches quotes for several symbols, reporting failures per symbol.

    One bad symbol never fails the whole request; its error message is
    returned next to the quotes that did resolve.
    """

    def __init__(self, market_data: MarketDataPort) -> None:
        self._market_data = market_data

    def execute(self, query: GetQuotesQuery) -> MultiQuoteResult:
        result = MultiQuoteResult(symbols=query.symbols)
        for symbol in query.symbols:
            try:
                result.quotes[symbol] = _to_result(self._market_data.get_quote(symbol))
            except MarketDomainError as exc:
                logger.warning("Quote for %s failed: %s", symbol, exc.message)
                result.errors[symbol] = exc.message
        logger.info(
            "Fetched %d/%d quotes", len(result.quotes), len(query.symbols)
        )
        return result
