"""
Adapter: Polygon.io reported financials.

Implements EarningsPort by reading quarterly income statements from
Polygon's ``/vX/reference/financials`` endpoint and extracting earnings
per share.
"""

import logging
from datetime import date
from typing import Any, Optional

import httpx

from app.domain.market.entities import EarningsReport
from app.domain.market.errors import MissingCredentialsError, UpstreamError
from app.domain.market.ports import EarningsPort

logger = logging.getLogger(__name__)

SOURCE = "Polygon"
DEFAULT_URL = "https://api.polygon.io/vX/reference/financials"


def _parse_date(raw: Any) -> Optional[date]:
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        return None


def _eps(result: dict[str, Any], field: str) -> Optional[float]:
    statement = (result.get("financials") or {}).get("income_statement") or {}
    value = (statement.get(field) or {}).get("value")
    return float(value) if isinstance(value, (int, float)) else None


class PolygonEarningsAdapter(EarningsPort):
    """Concrete adapter for Polygon.io financials.

    The key is sent as a bearer token rather than a query parameter.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    def get_earnings(self, symbol: str, limit: int = 8) -> list[EarningsReport]:
        """Return up to ``limit`` quarterly reports, newest first."""
        if not self._api_key:
            raise MissingCredentialsError(SOURCE)

        params = {
            "ticker": symbol.upper(),
            "timeframe": "quarterly",
            "order": "desc",
            "sort": "period_of_report_date",
            "limit": limit,
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.get(
                    self._base_url,
                    params=params,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Polygon returned HTTP %d for %s", exc.response.status_code, symbol
            )
            raise UpstreamError(SOURCE, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Polygon request failed for %s: %s", symbol, exc)
            raise UpstreamError(SOURCE, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise UpstreamError(SOURCE, "malformed JSON response") from exc

        results = payload.get("results") if isinstance(payload, dict) else None
        if results is None:
            raise UpstreamError(SOURCE, "response has no results")

        return [
            EarningsReport(
                start_date=_parse_date(r.get("start_date")),
                end_date=_parse_date(r.get("end_date")),
                fiscal_period=str(r.get("fiscal_period") or ""),
                fiscal_year=str(r.get("fiscal_year") or ""),
                basic_eps=_eps(r, "basic_earnings_per_share"),
                diluted_eps=_eps(r, "diluted_earnings_per_share"),
            )
            for r in results
            if isinstance(r, dict)
        ]
