"""
Tests for SMA and EMA indicator series.
"""

import math

import pytest

from app.domain.market.entities import MovingAverageKind
from app.domain.market.moving_averages import (
    exponential_moving_average,
    moving_averages,
    simple_moving_average,
)

CLOSES = [100.0, 102.0, 104.0, 106.0, 108.0]


class TestSimpleMovingAverage:
    """Tests for simple_moving_average."""

    def test_known_values(self, make_series) -> None:
        values = [p.value for p in simple_moving_average(make_series(CLOSES), 3)]
        assert values == [102.0, 104.0, 106.0]

    def test_points_are_dated_at_window_end(self, make_series) -> None:
        series = make_series(CLOSES)
        points = simple_moving_average(series, 3).to_list()
        assert [p.date for p in points] == [p.date for p in series[2:]]
        assert all(p.kind is MovingAverageKind.SMA and p.window == 3 for p in points)

    def test_empty_when_series_shorter_than_window(self, make_series) -> None:
        assert simple_moving_average(make_series(CLOSES), 6).to_list() == []

    @pytest.mark.parametrize("window", [0, -1])
    def test_empty_for_non_positive_window(self, make_series, window) -> None:
        assert simple_moving_average(make_series(CLOSES), window).to_list() == []

    def test_window_of_one_echoes_closes(self, make_series) -> None:
        values = [p.value for p in simple_moving_average(make_series(CLOSES), 1)]
        assert values == CLOSES

    def test_rounds_to_two_decimals(self, make_series) -> None:
        values = [p.value for p in simple_moving_average(make_series([1.0, 1.0, 2.0]), 3)]
        assert values == [1.33]

    def test_missing_close_counts_as_zero(self, make_series) -> None:
        values = [p.value for p in simple_moving_average(make_series([3.0, None, 3.0]), 3)]
        assert values == [2.0]

    def test_nan_close_counts_as_zero(self, make_series) -> None:
        values = [
            p.value for p in simple_moving_average(make_series([3.0, math.nan, 3.0]), 3)
        ]
        assert values == [2.0]

    def test_series_is_restartable(self, make_series) -> None:
        series = simple_moving_average(make_series(CLOSES), 2)
        assert list(series) == list(series)
        assert len(series) == 4


class TestExponentialMovingAverage:
    """Tests for exponential_moving_average."""

    def test_first_value_is_sma_seed(self, make_series) -> None:
        points = exponential_moving_average(make_series(CLOSES), 3).to_list()
        assert points[0].value == 102.0
        assert points[0].date == make_series(CLOSES)[2].date

    def test_known_values(self, make_series) -> None:
        # k = 0.5: 106*.5 + 102*.5 = 104, then 108*.5 + 104*.5 = 106
        values = [p.value for p in exponential_moving_average(make_series(CLOSES), 3)]
        assert values == [102.0, 104.0, 106.0]

    def test_values_stay_within_input_range(self, make_series) -> None:
        closes = [10.0, 14.0, 9.0, 13.0, 11.0, 15.0, 8.0, 12.0]
        points = exponential_moving_average(make_series(closes), 3).to_list()
        assert all(min(closes) <= p.value <= max(closes) for p in points)

    def test_empty_when_series_shorter_than_window(self, make_series) -> None:
        assert exponential_moving_average(make_series(CLOSES[:2]), 3).to_list() == []

    def test_missing_close_is_skipped_without_advancing(self, make_series) -> None:
        series = make_series([100.0, 102.0, 104.0, None, 106.0])
        points = exponential_moving_average(series, 3).to_list()

        assert [p.date for p in points] == [series[2].date, series[4].date]
        assert points[1].value == 104.0


class TestMovingAverages:
    """Tests for the per-period moving_averages bundle."""

    def test_builds_both_kinds_per_period(self, make_series) -> None:
        result = moving_averages(make_series(CLOSES), [2, 3])

        assert set(result) == {2, 3}
        assert result[3].sma.kind is MovingAverageKind.SMA
        assert result[3].ema.kind is MovingAverageKind.EMA
        assert len(result[2].sma) == 4

    def test_duplicate_periods_collapse(self, make_series) -> None:
        assert list(moving_averages(make_series(CLOSES), [3, 3])) == [3]

    def test_period_longer_than_history_is_empty_not_error(self, make_series) -> None:
        result = moving_averages(make_series(CLOSES), [200])
        assert result[200].sma.to_list() == []
        assert result[200].ema.to_list() == []
