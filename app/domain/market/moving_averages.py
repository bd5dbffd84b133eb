"""
Domain service: Moving-average indicators.

Pure functions deriving Simple and Exponential Moving Averages
from a daily price series. No framework imports. No IO.

Insufficient history is a valid result, not an error: every function
here returns an empty series rather than raising.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from app.domain.market.entities import (
    MovingAverageKind,
    MovingAveragePoint,
    PricePoint,
)

VALUE_DECIMALS = 2


def _numeric(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None if it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class MovingAverageSeries:
    """A lazily computed, restartable moving-average series.

    Nothing is computed until the series is iterated, and every
    iteration recomputes from the stored price series.
    """

    def __init__(
        self,
        series: list[PricePoint],
        window: int,
        kind: MovingAverageKind,
    ) -> None:
        self._series = list(series)
        self.window = window
        self.kind = kind

    def __iter__(self) -> Iterator[MovingAveragePoint]:
        if self.window < 1 or len(self._series) < self.window:
            return iter(())
        if self.kind is MovingAverageKind.SMA:
            return _iter_sma(self._series, self.window)
        return _iter_ema(self._series, self.window)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def to_list(self) -> list[MovingAveragePoint]:
        return list(self)

    def __repr__(self) -> str:
        return (
            f"MovingAverageSeries(kind={self.kind.value}, window={self.window}, "
            f"points={len(self._series)})"
        )


@dataclass(frozen=True)
class MovingAverageSet:
    """SMA and EMA series for one window length."""

    window: int
    sma: MovingAverageSeries
    ema: MovingAverageSeries


def _window_sum(closes: list[Optional[float]]) -> float:
    # Non-numeric closes contribute zero but still occupy their slot.
    return sum(c for c in closes if c is not None)


def _iter_sma(
    series: list[PricePoint], window: int
) -> Iterator[MovingAveragePoint]:
    closes = [_numeric(p.close) for p in series]
    for i in range(window - 1, len(series)):
        average = _window_sum(closes[i - window + 1 : i + 1]) / window
        yield MovingAveragePoint(
            date=series[i].date,
            value=round(average, VALUE_DECIMALS),
            kind=MovingAverageKind.SMA,
            window=window,
        )


def _iter_ema(
    series: list[PricePoint], window: int
) -> Iterator[MovingAveragePoint]:
    closes = [_numeric(p.close) for p in series]
    multiplier = 2 / (window + 1)

    ema = _window_sum(closes[:window]) / window
    yield MovingAveragePoint(
        date=series[window - 1].date,
        value=round(ema, VALUE_DECIMALS),
        kind=MovingAverageKind.EMA,
        window=window,
    )

    for i in range(window, len(series)):
        close = closes[i]
        if close is None:
            continue
        ema = close * multiplier + ema * (1 - multiplier)
        yield MovingAveragePoint(
            date=series[i].date,
            value=round(ema, VALUE_DECIMALS),
            kind=MovingAverageKind.EMA,
            window=window,
        )


def simple_moving_average(
    series: list[PricePoint], window: int
) -> MovingAverageSeries:
    """Trailing arithmetic mean of closing prices.

    One point per index from ``window - 1`` to the end of the series,
    each the mean of the ``window`` closes ending at that index.

    Args:
        series: Price points sorted by date ascending.
        window: Number of trailing points per average (>= 1).

    Returns:
        The SMA series; empty when ``len(series) < window``.
    """
    return MovingAverageSeries(series, window, MovingAverageKind.SMA)


def exponential_moving_average(
    series: list[PricePoint], window: int
) -> MovingAverageSeries:
    """Exponentially weighted average of closing prices.

    Seeded with the SMA of the first ``window`` points and smoothed with
    ``2 / (window + 1)``. Points with a non-numeric close are omitted
    and leave the running average untouched.

    Args:
        series: Price points sorted by date ascending.
        window: Smoothing span (>= 1).

    Returns:
        The EMA series; empty when ``len(series) < window``.
    """
    return MovingAverageSeries(series, window, MovingAverageKind.EMA)


def moving_averages(
    series: list[PricePoint], periods: Iterable[int]
) -> dict[int, MovingAverageSet]:
    """Build SMA and EMA series for every requested window length."""
    return {
        window: MovingAverageSet(
            window=window,
            sma=simple_moving_average(series, window),
            ema=exponential_moving_average(series, window),
        )
        for window in periods
    }
