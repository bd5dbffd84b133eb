"""
Adapter: Yahoo Finance market data.

Implements MarketDataPort on top of ``yfinance``.
Responsible for quotes, daily OHLCV history, company overview and
symbol search. Provider failures are wrapped in UpstreamError.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

import pandas as pd
import yfinance as yf

from app.domain.market.entities import (
    CompanyOverview,
    HistoryRange,
    PricePoint,
    Quote,
    SymbolMatch,
)
from app.domain.market.errors import SymbolNotFoundError, UpstreamError
from app.domain.market.ports import MarketDataPort

logger = logging.getLogger(__name__)

SOURCE = "Yahoo Finance"

# A multi-year request returning fewer rows than this is retried over 5 years.
MIN_LONG_HISTORY_POINTS = 100
FALLBACK_HISTORY_YEARS = 5
SEARCH_MAX_RESULTS = 10


def _optional_float(value: Any) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_int(value: Any) -> Optional[int]:
    number = _optional_float(value)
    return int(number) if number is not None else None


def _float_or_zero(value: Any) -> float:
    number = _optional_float(value)
    return number if number is not None else 0.0


def _market_date(epoch_seconds: Any) -> Optional[date]:
    if not epoch_seconds:
        return None
    try:
        return datetime.fromtimestamp(int(epoch_seconds), tz=timezone.utc).date()
    except (TypeError, ValueError, OverflowError, OSError):
        return None


class YahooMarketDataAdapter(MarketDataPort):
    """Concrete adapter for Yahoo Finance via ``yfinance``.

    No API key is needed. Every call hits the provider; nothing is cached.
    """

    def _info(self, symbol: str) -> dict[str, Any]:
        try:
            info = yf.Ticker(symbol).info
        except Exception as exc:
            logger.error("Yahoo Finance info lookup failed for %s: %s", symbol, exc)
            raise UpstreamError(SOURCE, str(exc)) from exc
        return info or {}

    def get_quote(self, symbol: str) -> Quote:
        """Return the latest regular-market quote for a symbol."""
        symbol = symbol.upper()
        info = self._info(symbol)

        price = _optional_float(
            info.get("regularMarketPrice", info.get("currentPrice"))
        )
        if price is None:
            raise SymbolNotFoundError(symbol)

        previous_close = _float_or_zero(
            info.get("regularMarketPreviousClose", info.get("previousClose"))
        )
        change = price - previous_close if previous_close else 0.0
        change_percent = _optional_float(info.get("regularMarketChangePercent"))
        if change_percent is None:
            change_percent = (change / previous_close * 100) if previous_close else 0.0

        return Quote(
            symbol=info.get("symbol") or symbol,
            open=_float_or_zero(info.get("regularMarketOpen")),
            high=_float_or_zero(info.get("regularMarketDayHigh")),
            low=_float_or_zero(info.get("regularMarketDayLow")),
            price=price,
            volume=_optional_int(info.get("regularMarketVolume")) or 0,
            latest_trading_day=_market_date(info.get("regularMarketTime")),
            previous_close=previous_close,
            change=round(change, 4),
            change_percent=round(change_percent, 4),
        )

    def get_price_history(
        self, symbol: str, history_range: HistoryRange
    ) -> list[PricePoint]:
        """Return daily OHLCV history ordered by date ascending.

        Long ranges that come back suspiciously short (newly listed or
        patchy symbols) are retried over the last five years.
        """
        symbol = symbol.upper()
        points = self._history(symbol, history_range)

        if history_range.is_long and len(points) < MIN_LONG_HISTORY_POINTS:
            fallback = HistoryRange.trailing_years(
                FALLBACK_HISTORY_YEARS, history_range.end
            )
            logger.info(
                "Only %d points for %s over %s..%s, retrying from %s",
                len(points),
                symbol,
                history_range.start,
                history_range.end,
                fallback.start,
            )
            points = self._history(symbol, fallback)

        return points

    def _history(self, symbol: str, history_range: HistoryRange) -> list[PricePoint]:
        try:
            frame = yf.Ticker(symbol).history(
                start=history_range.start.isoformat(),
                # yfinance treats ``end`` as exclusive
                end=(history_range.end + timedelta(days=1)).isoformat(),
                interval="1d",
                auto_adjust=False,
            )
        except Exception as exc:
            logger.error("Yahoo Finance history failed for %s: %s", symbol, exc)
            raise UpstreamError(SOURCE, str(exc)) from exc

        if frame is None or frame.empty:
            return []

        points = [
            PricePoint(
                date=index.date() if hasattr(index, "date") else index,
                open=_optional_float(row.get("Open")),
                high=_optional_float(row.get("High")),
                low=_optional_float(row.get("Low")),
                close=_optional_float(row.get("Close")),
                volume=_optional_int(row.get("Volume")),
            )
            for index, row in frame.iterrows()
        ]
        points.sort(key=lambda p: p.date)
        return points

    def get_company_overview(self, symbol: str) -> CompanyOverview:
        """Return name, description, sector and valuation figures."""
        symbol = symbol.upper()
        info = self._info(symbol)

        name = info.get("longName") or info.get("shortName")
        if not name and info.get("regularMarketPrice") is None:
            raise SymbolNotFoundError(symbol)

        return CompanyOverview(
            symbol=info.get("symbol") or symbol,
            name=name or symbol,
            description=(
                info.get("longBusinessSummary")
                or info.get("description")
                or "No description available"
            ),
            sector=info.get("sector") or "N/A",
            industry=info.get("industry") or "N/A",
            market_cap=_optional_float(info.get("marketCap")),
            pe_ratio=_optional_float(info.get("trailingPE")),
        )

    def search(self, keywords: str) -> list[SymbolMatch]:
        """Return up to ten symbols matching the keywords."""
        try:
            quotes = yf.Search(keywords, max_results=SEARCH_MAX_RESULTS).quotes
        except Exception as exc:
            logger.error("Yahoo Finance search failed for %r: %s", keywords, exc)
            raise UpstreamError(SOURCE, str(exc)) from exc

        return [
            SymbolMatch(
                symbol=q["symbol"],
                name=q.get("shortname") or q.get("longname") or q["symbol"],
                quote_type=q.get("quoteType") or "N/A",
                exchange=q.get("exchange") or "N/A",
            )
            for q in quotes or []
            if q.get("symbol")
        ]
