"""
Tests for the market application layer (use cases).

Ports are replaced with MagicMock/AsyncMock; no provider is contacted.
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.market.assess_risk import AssessRiskUseCase
from app.application.market.compute_indicators import ComputeIndicatorsUseCase
from app.application.market.dtos import (
    ComputeIndicatorsCommand,
    GetEarningsQuery,
    GetHistoryQuery,
    GetQuotesQuery,
    RateLimitStatusQuery,
    SearchSymbolsQuery,
    SymbolQuery,
)
from app.application.market.get_earnings import GetEarningsUseCase
from app.application.market.get_price_history import GetPriceHistoryUseCase
from app.application.market.get_quote import GetMultipleQuotesUseCase, GetQuoteUseCase
from app.application.market.get_rate_limit_status import GetRateLimitStatusUseCase
from app.application.market.search_symbols import SearchSymbolsUseCase
from app.domain.market.entities import (
    ArticleRecord,
    EarningsReport,
    Quote,
    RiskCategorySummary,
    Sentiment,
)
from app.domain.market.errors import SymbolNotFoundError, ValidationError
from app.domain.market.ports import EarningsPort, MarketDataPort
from app.domain.market.risk_radar import RiskSignalAggregator
from app.shared.security.rate_governor import RateGovernor


def _quote(symbol: str) -> Quote:
    return Quote(
        symbol=symbol,
        open=10.0,
        high=11.0,
        low=9.0,
        price=10.5,
        volume=100,
        latest_trading_day=date(2024, 6, 14),
        previous_close=10.0,
        change=0.5,
        change_percent=5.0,
    )


@pytest.fixture
def market_data() -> MagicMock:
    return MagicMock(spec=MarketDataPort)


class TestGetQuotes:
    """Tests for single and batch quote use cases."""

    def test_single_quote(self, market_data) -> None:
        market_data.get_quote.return_value = _quote("AAPL")
        result = GetQuoteUseCase(market_data).execute(SymbolQuery("AAPL"))
        assert result.price == 10.5

    def test_batch_reports_failures_inline(self, market_data) -> None:
        def get_quote(symbol):
            if symbol == "ZZZZ":
                raise SymbolNotFoundError(symbol)
            return _quote(symbol)

        market_data.get_quote.side_effect = get_quote

        result = GetMultipleQuotesUseCase(market_data).execute(
            GetQuotesQuery(("AAPL", "ZZZZ", "MSFT"))
        )

        assert list(result.quotes) == ["AAPL", "MSFT"]
        assert result.errors == {"ZZZZ": "Symbol not found: ZZZZ"}
        assert result.symbols == ("AAPL", "ZZZZ", "MSFT")


class TestGetPriceHistory:
    """Tests for GetPriceHistoryUseCase."""

    def test_compact_requests_last_hundred_days(self, market_data, make_series) -> None:
        market_data.get_price_history.return_value = make_series([1.0, 2.0])

        result = GetPriceHistoryUseCase(market_data).execute(GetHistoryQuery("AAPL"))

        history_range = market_data.get_price_history.call_args.args[1]
        assert history_range.end - history_range.start == timedelta(days=100)
        assert result.output_size == "compact"
        assert len(result.points) == 2

    def test_full_requests_twenty_years(self, market_data) -> None:
        market_data.get_price_history.return_value = []

        GetPriceHistoryUseCase(market_data).execute(GetHistoryQuery("AAPL", "FULL"))

        history_range = market_data.get_price_history.call_args.args[1]
        assert history_range.end.year - history_range.start.year == 20

    def test_invalid_output_size(self, market_data) -> None:
        with pytest.raises(ValidationError):
            GetPriceHistoryUseCase(market_data).execute(GetHistoryQuery("AAPL", "medium"))
        market_data.get_price_history.assert_not_called()


class TestComputeIndicators:
    """Tests for ComputeIndicatorsUseCase."""

    def test_builds_series_per_period(self, market_data, make_series) -> None:
        market_data.get_price_history.return_value = make_series(
            [100.0, 102.0, 104.0, 106.0, 108.0]
        )

        result = ComputeIndicatorsUseCase(market_data).execute(
            ComputeIndicatorsCommand("AAPL", (3, 2, 10))
        )

        assert result.periods == (2, 3, 10)
        assert [p.value for p in result.sma[3]] == [102.0, 104.0, 106.0]
        assert [p.value for p in result.ema[3]] == [102.0, 104.0, 106.0]
        assert result.sma[10] == []

    def test_history_covers_longest_window(self, market_data) -> None:
        market_data.get_price_history.return_value = []

        ComputeIndicatorsUseCase(market_data).execute(
            ComputeIndicatorsCommand("AAPL", (20, 200))
        )

        history_range = market_data.get_price_history.call_args.args[1]
        assert (history_range.end - history_range.start).days >= 400

    @pytest.mark.parametrize("periods", [(), (0,), (20, -1), (5000,)])
    def test_rejects_invalid_periods(self, market_data, periods) -> None:
        with pytest.raises(ValidationError):
            ComputeIndicatorsUseCase(market_data).execute(
                ComputeIndicatorsCommand("AAPL", periods)
            )


class TestSearchSymbols:
    def test_blank_keywords_rejected(self, market_data) -> None:
        with pytest.raises(ValidationError):
            SearchSymbolsUseCase(market_data).execute(SearchSymbolsQuery("  "))


class TestGetEarnings:
    """Tests for GetEarningsUseCase."""

    def test_computes_quarter_over_quarter_change(self) -> None:
        port = MagicMock(spec=EarningsPort)
        port.get_earnings.return_value = [
            EarningsReport(None, None, "Q2", "2024", 1.5, 1.4),
            EarningsReport(None, None, "Q1", "2024", 1.25, 1.2),
            EarningsReport(None, None, "Q4", "2023", None, None),
        ]

        result = GetEarningsUseCase(port).execute(GetEarningsQuery("AAPL", limit=3))

        assert [e.eps_change for e in result.earnings] == [0.25, None, None]
        port.get_earnings.assert_called_once_with("AAPL", 3)

    def test_rejects_out_of_range_limit(self) -> None:
        with pytest.raises(ValidationError):
            GetEarningsUseCase(MagicMock(spec=EarningsPort)).execute(
                GetEarningsQuery("AAPL", limit=0)
            )


class TestAssessRisk:
    """Tests for AssessRiskUseCase."""

    @pytest.mark.asyncio
    async def test_converts_summaries(self) -> None:
        summary = RiskCategorySummary(category="Earnings Guidance")
        summary.add(
            ArticleRecord(
                title="Guidance raised",
                url="https://news.example/1",
                source="Wire",
                published_at=None,
                sentiment=Sentiment.POSITIVE,
                description=None,
            )
        )
        aggregator = MagicMock(spec=RiskSignalAggregator)
        aggregator.assess = AsyncMock(return_value={"Earnings Guidance": summary})

        result = await AssessRiskUseCase(aggregator).execute(SymbolQuery("AAPL"))

        assert result.article_count == 1
        category = result.categories["Earnings Guidance"]
        assert category.positive_count == 1
        assert category.articles[0].sentiment == "POSITIVE"


class TestGetRateLimitStatus:
    def test_reports_without_consuming(self, clock) -> None:
        governor = RateGovernor(default_limit=5, default_window_ms=1000, clock=clock)
        governor.admit("1.2.3.4")
        use_case = GetRateLimitStatusUseCase(governor)

        first = use_case.execute(RateLimitStatusQuery("1.2.3.4"))
        second = use_case.execute(RateLimitStatusQuery("1.2.3.4"))

        assert first.remaining == second.remaining == 4
        assert first.reset_at == clock.now + 1000
        assert first.limit == 5
