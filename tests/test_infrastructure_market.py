"""
Tests for the market infrastructure adapters.

HTTP providers are exercised through ``httpx.MockTransport``;
``yfinance`` is patched at the adapter's import site.
"""

from datetime import date, datetime, timezone
from unittest.mock import patch

import httpx
import pandas as pd
import pytest

from app.domain.market.entities import HistoryRange
from app.domain.market.errors import (
    MissingCredentialsError,
    SymbolNotFoundError,
    UpstreamError,
)
from app.infrastructure.market.news_api_adapter import NewsApiAdapter
from app.infrastructure.market.polygon_earnings_adapter import PolygonEarningsAdapter
from app.infrastructure.market.yahoo_market_data_adapter import YahooMarketDataAdapter

YF = "app.infrastructure.market.yahoo_market_data_adapter.yf"


# ------------------------------------------------------------------ #
# NewsAPI
# ------------------------------------------------------------------ #


class TestNewsApiAdapter:
    """Tests for NewsApiAdapter."""

    def test_ensure_configured_without_key(self) -> None:
        with pytest.raises(MissingCredentialsError):
            NewsApiAdapter(api_key=None).ensure_configured()

    @pytest.mark.asyncio
    async def test_fetch_recent_sends_query_and_parses_articles(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "status": "ok",
                    "articles": [
                        {
                            "title": " Apple expands buyback ",
                            "url": "https://news.example/1",
                            "source": {"id": None, "name": "Reuters"},
                            "publishedAt": "2024-06-14T10:00:00Z",
                            "content": "Body",
                            "description": "Desc",
                        },
                        {"title": "No source", "url": "https://news.example/2"},
                    ],
                },
            )

        adapter = NewsApiAdapter(api_key="secret", transport=httpx.MockTransport(handler))
        articles = await adapter.fetch_recent('"Apple Inc." OR AAPL', date(2024, 6, 8))

        params = seen[0].url.params
        assert params["q"] == '"Apple Inc." OR AAPL'
        assert params["from"] == "2024-06-08"
        assert params["sortBy"] == "relevancy"
        assert params["language"] == "en"
        assert seen[0].headers["X-Api-Key"] == "secret"
        assert "secret" not in str(seen[0].url)

        assert articles[0].title == "Apple expands buyback"
        assert articles[0].source == "Reuters"
        assert articles[0].published_at == datetime(2024, 6, 14, 10, tzinfo=timezone.utc)
        assert articles[1].source == "Unknown"
        assert articles[1].content is None

    @pytest.mark.asyncio
    async def test_http_error_becomes_upstream_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        adapter = NewsApiAdapter(api_key="k", transport=transport)

        with pytest.raises(UpstreamError):
            await adapter.fetch_recent("AAPL", date(2024, 6, 8))

    @pytest.mark.asyncio
    async def test_error_status_payload_becomes_upstream_error(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                200, json={"status": "error", "message": "rateLimited"}
            )
        )
        adapter = NewsApiAdapter(api_key="k", transport=transport)

        with pytest.raises(UpstreamError, match="rateLimited"):
            await adapter.fetch_recent("AAPL", date(2024, 6, 8))

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        adapter = NewsApiAdapter(api_key="k", transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamError):
            await adapter.fetch_recent("AAPL", date(2024, 6, 8))


# ------------------------------------------------------------------ #
# Polygon
# ------------------------------------------------------------------ #


class TestPolygonEarningsAdapter:
    """Tests for PolygonEarningsAdapter."""

    def test_missing_key(self) -> None:
        with pytest.raises(MissingCredentialsError):
            PolygonEarningsAdapter(api_key="").get_earnings("AAPL")

    def test_parses_quarterly_eps(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "start_date": "2024-01-01",
                            "end_date": "2024-03-31",
                            "fiscal_period": "Q2",
                            "fiscal_year": "2024",
                            "financials": {
                                "income_statement": {
                                    "basic_earnings_per_share": {"value": 1.53},
                                    "diluted_earnings_per_share": {"value": 1.52},
                                }
                            },
                        },
                        {"start_date": "2023-10-01", "financials": {}},
                    ]
                },
            )

        adapter = PolygonEarningsAdapter(
            api_key="secret", transport=httpx.MockTransport(handler)
        )
        reports = adapter.get_earnings("aapl", limit=2)

        assert seen[0].url.params["ticker"] == "AAPL"
        assert seen[0].url.params["limit"] == "2"
        assert seen[0].headers["Authorization"] == "Bearer secret"
        assert reports[0].basic_eps == 1.53
        assert reports[0].diluted_eps == 1.52
        assert reports[0].end_date == date(2024, 3, 31)
        assert reports[1].basic_eps is None

    def test_missing_results_is_upstream_error(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"status": "ERROR"})
        )
        with pytest.raises(UpstreamError):
            PolygonEarningsAdapter(api_key="k", transport=transport).get_earnings("AAPL")


# ------------------------------------------------------------------ #
# Yahoo Finance
# ------------------------------------------------------------------ #


def _frame(days: int, start: str = "2024-01-02") -> pd.DataFrame:
    index = pd.date_range(start, periods=days, freq="D")
    return pd.DataFrame(
        {
            "Open": [10.0] * days,
            "High": [11.0] * days,
            "Low": [9.0] * days,
            "Close": [10.5] * days,
            "Volume": [1000] * days,
        },
        index=index,
    )


class TestYahooMarketDataAdapter:
    """Tests for YahooMarketDataAdapter."""

    def test_get_quote_maps_info(self) -> None:
        info = {
            "symbol": "AAPL",
            "regularMarketPrice": 190.0,
            "regularMarketPreviousClose": 188.0,
            "regularMarketOpen": 188.5,
            "regularMarketDayHigh": 191.0,
            "regularMarketDayLow": 187.5,
            "regularMarketVolume": 5_000_000,
            "regularMarketTime": 1718380800,
        }
        with patch(YF) as yf:
            yf.Ticker.return_value.info = info
            quote = YahooMarketDataAdapter().get_quote("aapl")

        yf.Ticker.assert_called_once_with("AAPL")
        assert quote.price == 190.0
        assert quote.change == 2.0
        assert quote.change_percent == pytest.approx(1.0638, abs=1e-4)
        assert quote.latest_trading_day == date(2024, 6, 14)

    def test_get_quote_unknown_symbol(self) -> None:
        with patch(YF) as yf:
            yf.Ticker.return_value.info = {}
            with pytest.raises(SymbolNotFoundError):
                YahooMarketDataAdapter().get_quote("ZZZZ")

    def test_provider_failure_is_upstream_error(self) -> None:
        with patch(YF) as yf:
            yf.Ticker.side_effect = RuntimeError("rate limited")
            with pytest.raises(UpstreamError):
                YahooMarketDataAdapter().get_quote("AAPL")

    def test_history_rows_map_to_points(self) -> None:
        frame = _frame(3)
        frame.loc[frame.index[1], "Close"] = float("nan")
        with patch(YF) as yf:
            yf.Ticker.return_value.history.return_value = frame
            points = YahooMarketDataAdapter().get_price_history(
                "AAPL", HistoryRange(date(2024, 1, 1), date(2024, 1, 10))
            )

        assert [p.date for p in points] == [
            date(2024, 1, 2),
            date(2024, 1, 3),
            date(2024, 1, 4),
        ]
        assert points[0].close == 10.5
        assert points[1].close is None
        assert points[0].volume == 1000

    def test_short_full_history_falls_back_to_five_years(self) -> None:
        with patch(YF) as yf:
            history = yf.Ticker.return_value.history
            history.side_effect = [_frame(40), _frame(120)]
            points = YahooMarketDataAdapter().get_price_history(
                "NEWCO", HistoryRange.trailing_years(20, date(2024, 6, 14))
            )

        assert len(points) == 120
        assert history.call_count == 2
        assert history.call_args.kwargs["start"] == "2019-06-14"

    def test_empty_history_is_empty_list(self) -> None:
        with patch(YF) as yf:
            yf.Ticker.return_value.history.return_value = pd.DataFrame()
            points = YahooMarketDataAdapter().get_price_history(
                "AAPL", HistoryRange.trailing(100, date(2024, 6, 14))
            )
        assert points == []

    def test_overview_defaults(self) -> None:
        with patch(YF) as yf:
            yf.Ticker.return_value.info = {"symbol": "AAPL", "longName": "Apple Inc."}
            overview = YahooMarketDataAdapter().get_company_overview("AAPL")

        assert overview.name == "Apple Inc."
        assert overview.sector == "N/A"
        assert overview.description == "No description available"
        assert overview.market_cap is None

    def test_search_maps_quotes(self) -> None:
        with patch(YF) as yf:
            yf.Search.return_value.quotes = [
                {"symbol": "AAPL", "shortname": "Apple Inc.", "quoteType": "EQUITY",
                 "exchange": "NMS"},
                {"shortname": "no symbol"},
            ]
            matches = YahooMarketDataAdapter().search("apple")

        yf.Search.assert_called_once_with("apple", max_results=10)
        assert [m.symbol for m in matches] == ["AAPL"]
        assert matches[0].exchange == "NMS"


def test_history_range_trailing_years_handles_leap_day() -> None:
    history_range = HistoryRange.trailing_years(5, date(2024, 2, 29))
    assert history_range.start == date(2019, 2, 28)
