"""
Adapter: NewsAPI news search.

Implements NewsPort against the NewsAPI ``/v2/everything`` endpoint
using ``httpx.AsyncClient``. The API key travels in the ``X-Api-Key``
header so it never shows up in logged URLs.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

import httpx

from app.domain.market.entities import NewsArticle
from app.domain.market.errors import MissingCredentialsError, UpstreamError
from app.domain.market.ports import NewsPort

logger = logging.getLogger(__name__)

SOURCE = "NewsAPI"
DEFAULT_URL = "https://newsapi.org/v2/everything"
DEFAULT_PAGE_SIZE = 50


def _parse_published_at(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


class NewsApiAdapter(NewsPort):
    """Concrete adapter for NewsAPI.

    Args:
        api_key: NewsAPI key; calls fail with MissingCredentialsError without it.
        base_url: Endpoint URL.
        timeout: HTTP timeout in seconds.
        page_size: Articles requested per call (NewsAPI allows up to 100).
        language: Server-side language filter.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_URL,
        timeout: float = 10.0,
        page_size: int = DEFAULT_PAGE_SIZE,
        language: str = "en",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._page_size = page_size
        self._language = language
        self._transport = transport

    def ensure_configured(self) -> None:
        if not self._api_key:
            raise MissingCredentialsError(SOURCE)

    async def fetch_recent(self, query: str, since: date) -> list[NewsArticle]:
        """Return relevance-sorted English articles matching ``query``.

        Raises:
            MissingCredentialsError: If no API key is configured.
            UpstreamError: On transport errors, non-2xx responses,
                malformed JSON, or a non-``ok`` payload status.
        """
        self.ensure_configured()
        params = {
            "q": query,
            "from": since.isoformat(),
            "sortBy": "relevancy",
            "language": self._language,
            "pageSize": self._page_size,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.get(
                    self._base_url,
                    params=params,
                    headers={"X-Api-Key": self._api_key},
                )
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "NewsAPI returned HTTP %d for query %r",
                exc.response.status_code,
                query,
            )
            raise UpstreamError(SOURCE, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("NewsAPI request failed for query %r: %s", query, exc)
            raise UpstreamError(SOURCE, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise UpstreamError(SOURCE, "malformed JSON response") from exc

        if not isinstance(payload, dict) or payload.get("status") != "ok":
            message = payload.get("message") if isinstance(payload, dict) else None
            raise UpstreamError(SOURCE, message or "non-success status")

        return [
            self._to_article(raw)
            for raw in payload.get("articles") or []
            if isinstance(raw, dict)
        ]

    @staticmethod
    def _to_article(raw: dict[str, Any]) -> NewsArticle:
        source = raw.get("source")
        source_name = source.get("name") if isinstance(source, dict) else None
        return NewsArticle(
            title=(raw.get("title") or "").strip(),
            url=raw.get("url") or "",
            source=source_name or "Unknown",
            published_at=_parse_published_at(raw.get("publishedAt")),
            content=raw.get("content") or None,
            description=raw.get("description") or None,
        )
