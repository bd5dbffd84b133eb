"""
Use case: Get daily OHLCV price history for a symbol.

Input:  GetHistoryQuery (symbol, output_size)
Output: HistoryResult
"""

import logging

from app.application.market.dtos import GetHistoryQuery, HistoryResult, PricePointResult
from app.domain.market.entities import HistoryRange, OutputSize
from app.domain.market.errors import ValidationError
from app.domain.market.ports import MarketDataPort

logger = logging.getLogger(__name__)


def parse_output_size(raw: str) -> OutputSize:
    """Map the ``outputsize`` parameter to an OutputSize.

    Raises:
        ValidationError: If the value is neither ``compact`` nor ``full``.
    """
    try:
        return OutputSize(raw.strip().lower())
    except ValueError as exc:
        raise ValidationError(
            "outputsize", 'must be either "compact" or "full"'
        ) from exc


class GetPriceHistoryUseCase:
    """Fetches daily history over a range derived from the output size."""

    def __init__(self, market_data: MarketDataPort) -> None:
        self._market_data = market_data

    def execute(self, query: GetHistoryQuery) -> HistoryResult:
        output_size = parse_output_size(query.output_size)
        history_range = HistoryRange.for_output_size(output_size)
        points = self._market_data.get_price_history(query.symbol, history_range)
        logger.info(
            "History for %s (%s): %d points", query.symbol, output_size.value, len(points)
        )
        return HistoryResult(
            symbol=query.symbol,
            output_size=output_size.value,
            points=[
                PricePointResult(
                    date=p.date,
                    open=p.open,
                    high=p.high,
                    low=p.low,
                    close=p.close,
                    volume=p.volume,
                )
                for p in points
            ],
        )
