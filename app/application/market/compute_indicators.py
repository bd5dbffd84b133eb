"""
Use case: Compute moving-average indicators for a symbol.

Fetches enough daily history to fill the longest window twice over,
then derives SMA and EMA series for every requested window.

Input:  ComputeIndicatorsCommand (symbol, periods)
Output: IndicatorsResult
"""

import logging

from app.application.market.dtos import (
    ComputeIndicatorsCommand,
    IndicatorsResult,
    MovingAveragePointResult,
)
from app.domain.market.entities import HistoryRange, MovingAveragePoint
from app.domain.market.errors import ValidationError
from app.domain.market.moving_averages import MovingAverageSeries, moving_averages
from app.domain.market.ports import MarketDataPort

logger = logging.getLogger(__name__)

MAX_PERIOD = 1000
# Calendar days covering weekends and holidays on top of 2x the window
CALENDAR_PADDING_DAYS = 30


def _points(series: MovingAverageSeries) -> list[MovingAveragePointResult]:
    return [_to_point(p) for p in series]


def _to_point(point: MovingAveragePoint) -> MovingAveragePointResult:
    return MovingAveragePointResult(date=point.date, value=point.value)


class ComputeIndicatorsUseCase:
    """Builds SMA and EMA series for each requested window length."""

    def __init__(self, market_data: MarketDataPort) -> None:
        self._market_data = market_data

    def execute(self, command: ComputeIndicatorsCommand) -> IndicatorsResult:
        """Compute the indicators.

        Raises:
            ValidationError: If no periods are given or any is outside
                ``1..MAX_PERIOD``.
        """
        if not command.periods:
            raise ValidationError("periods", "at least one period is required")
        for period in command.periods:
            if period < 1 or period > MAX_PERIOD:
                raise ValidationError(
                    "periods", f"must be integers between 1 and {MAX_PERIOD}"
                )

        history_range = HistoryRange.trailing(
            max(command.periods) * 2 + CALENDAR_PADDING_DAYS
        )
        history = self._market_data.get_price_history(command.symbol, history_range)
        sets = moving_averages(history, command.periods)
        periods = tuple(sorted(sets))

        logger.info(
            "Computed moving averages %s for %s over %d points",
            list(periods),
            command.symbol,
            len(history),
        )
        return IndicatorsResult(
            symbol=command.symbol,
            periods=periods,
            sma={p: _points(sets[p].sma) for p in periods},
            ema={p: _points(sets[p].ema) for p in periods},
        )
