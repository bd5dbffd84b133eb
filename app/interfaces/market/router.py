"""
FastAPI router for the market bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by path/query constraints; query strings
that need parsing raise ValidationError.
Error mapping is handled by centralized error handlers.
"""

import re
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, Request

from app.application.market.assess_risk import AssessRiskUseCase
from app.application.market.compute_indicators import ComputeIndicatorsUseCase
from app.application.market.dtos import (
    ComputeIndicatorsCommand,
    GetEarningsQuery,
    GetHistoryQuery,
    GetQuotesQuery,
    QuoteResult,
    RateLimitStatusQuery,
    SearchSymbolsQuery,
    SymbolQuery,
)
from app.application.market.get_company_overview import GetCompanyOverviewUseCase
from app.application.market.get_earnings import GetEarningsUseCase
from app.application.market.get_price_history import GetPriceHistoryUseCase
from app.application.market.get_quote import GetMultipleQuotesUseCase, GetQuoteUseCase
from app.application.market.get_rate_limit_status import GetRateLimitStatusUseCase
from app.application.market.search_symbols import SearchSymbolsUseCase
from app.core.config import settings
from app.domain.market.errors import ValidationError
from app.interfaces.market.dependencies import (
    get_assess_risk_use_case,
    get_company_overview_use_case,
    get_compute_indicators_use_case,
    get_earnings_use_case,
    get_multiple_quotes_use_case,
    get_price_history_use_case,
    get_quote_use_case,
    get_rate_limit_status_use_case,
    get_search_symbols_use_case,
)
from app.interfaces.market.schemas import (
    SYMBOL_DESCRIPTION,
    SYMBOL_PATTERN,
    EarningsData,
    EarningsItem,
    EarningsResponse,
    ErrorResponse,
    HistoryResponse,
    MovingAverageItem,
    MovingAveragesData,
    MovingAveragesResponse,
    MultiQuoteResponse,
    OverviewData,
    OverviewResponse,
    PricePointItem,
    QuoteData,
    QuoteErrorItem,
    QuoteResponse,
    RateLimitStatusData,
    RateLimitStatusResponse,
    RiskArticleItem,
    RiskCategoryItem,
    RiskRadarResponse,
    SearchResponse,
    SymbolMatchItem,
)
from app.shared.security.rate_limiting import HEAVY_RATE_LIMIT, client_key, limiter

router = APIRouter(prefix="/stocks", tags=["stocks"])

_SYMBOL_RE = re.compile(SYMBOL_PATTERN)
MAX_BATCH_SYMBOLS = 20

SymbolPath = Annotated[
    str, Path(pattern=SYMBOL_PATTERN, description=SYMBOL_DESCRIPTION)
]


def parse_symbols(raw: str) -> tuple[str, ...]:
    """Split a comma-separated symbol list, keeping request order.

    Raises:
        ValidationError: If the list is empty, too long, or holds a
            malformed symbol.
    """
    symbols = tuple(s.strip() for s in raw.split(",") if s.strip())
    if not symbols:
        raise ValidationError("symbols", "at least one symbol is required")
    if len(symbols) > MAX_BATCH_SYMBOLS:
        raise ValidationError(
            "symbols", f"at most {MAX_BATCH_SYMBOLS} symbols per request"
        )
    for symbol in symbols:
        if not _SYMBOL_RE.match(symbol):
            raise ValidationError("symbols", f"malformed symbol {symbol!r}")
    return symbols


def parse_periods(raw: Optional[str]) -> tuple[int, ...]:
    """Parse ``periods`` as comma-separated positive integers.

    Falls back to the configured default periods when absent.

    Raises:
        ValidationError: If any element is not a positive integer.
    """
    if raw is None or not raw.strip():
        return tuple(settings.default_ma_periods)

    periods: list[int] = []
    for part in raw.split(","):
        try:
            period = int(part.strip())
        except ValueError as exc:
            raise ValidationError(
                "periods", "must be comma-separated positive integers"
            ) from exc
        if period < 1:
            raise ValidationError("periods", "must be comma-separated positive integers")
        periods.append(period)
    return tuple(periods)


def _quote_data(result: QuoteResult) -> QuoteData:
    return QuoteData(
        symbol=result.symbol,
        open=result.open,
        high=result.high,
        low=result.low,
        price=result.price,
        volume=result.volume,
        latest_trading_day=result.latest_trading_day,
        previous_close=result.previous_close,
        change=result.change,
        change_percent=result.change_percent,
    )


@router.get(
    "/quote/{symbol}",
    response_model=QuoteResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Latest quote",
    description="Latest regular-market quote for a symbol.",
)
def get_quote(
    symbol: SymbolPath,
    use_case: GetQuoteUseCase = Depends(get_quote_use_case),
) -> QuoteResponse:
    """Return the latest quote for a symbol."""
    result = use_case.execute(SymbolQuery(symbol=symbol))
    return QuoteResponse(data=_quote_data(result))


@router.get(
    "/quotes",
    response_model=MultiQuoteResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Batch quotes",
    description=(
        "Quotes for a comma-separated symbol list. A symbol that fails "
        "carries an error message instead of failing the whole request."
    ),
)
def get_multiple_quotes(
    symbols: str = Query(..., description="Comma-separated symbols, e.g. AAPL,MSFT"),
    use_case: GetMultipleQuotesUseCase = Depends(get_multiple_quotes_use_case),
) -> MultiQuoteResponse:
    """Return quotes for several symbols."""
    result = use_case.execute(GetQuotesQuery(symbols=parse_symbols(symbols)))
    data: dict[str, QuoteData | QuoteErrorItem] = {}
    for symbol in result.symbols:
        if symbol in result.quotes:
            data[symbol] = _quote_data(result.quotes[symbol])
        else:
            data[symbol] = QuoteErrorItem(error=result.errors.get(symbol, "Unknown error"))
    return MultiQuoteResponse(data=data, symbols=list(result.symbols))


@router.get(
    "/historical/{symbol}",
    response_model=HistoryResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Daily price history",
    description="Daily OHLCV bars: compact is the last 100 days, full is 20 years.",
)
def get_historical(
    symbol: SymbolPath,
    outputsize: str = Query("compact", description="compact or full"),
    use_case: GetPriceHistoryUseCase = Depends(get_price_history_use_case),
) -> HistoryResponse:
    """Return daily history for a symbol."""
    result = use_case.execute(GetHistoryQuery(symbol=symbol, output_size=outputsize))
    return HistoryResponse(
        data=[
            PricePointItem(
                date=p.date,
                open=p.open,
                high=p.high,
                low=p.low,
                close=p.close,
                volume=p.volume,
            )
            for p in result.points
        ],
        symbol=result.symbol,
        outputsize=result.output_size,
    )


@router.get(
    "/overview/{symbol}",
    response_model=OverviewResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Company overview",
)
def get_overview(
    symbol: SymbolPath,
    use_case: GetCompanyOverviewUseCase = Depends(get_company_overview_use_case),
) -> OverviewResponse:
    """Return descriptive fundamentals for a company."""
    result = use_case.execute(SymbolQuery(symbol=symbol))
    return OverviewResponse(
        data=OverviewData(
            symbol=result.symbol,
            name=result.name,
            description=result.description,
            sector=result.sector,
            industry=result.industry,
            market_cap=result.market_cap,
            pe_ratio=result.pe_ratio,
        ),
        symbol=symbol,
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Symbol search",
)
def search_symbols(
    keywords: str = Query(..., min_length=1, max_length=100),
    use_case: SearchSymbolsUseCase = Depends(get_search_symbols_use_case),
) -> SearchResponse:
    """Search for symbols by ticker or company name."""
    matches = use_case.execute(SearchSymbolsQuery(keywords=keywords))
    return SearchResponse(
        data=[
            SymbolMatchItem(
                symbol=m.symbol,
                name=m.name,
                quote_type=m.quote_type,
                exchange=m.exchange,
            )
            for m in matches
        ],
        keywords=keywords,
        count=len(matches),
    )


@router.get(
    "/moving-averages/{symbol}",
    response_model=MovingAveragesResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Moving averages",
    description="SMA and EMA series per window, computed from daily closes.",
)
def get_moving_averages(
    symbol: SymbolPath,
    periods: Optional[str] = Query(
        None, description="Comma-separated window lengths, default 20,50,200"
    ),
    use_case: ComputeIndicatorsUseCase = Depends(get_compute_indicators_use_case),
) -> MovingAveragesResponse:
    """Return SMA and EMA series for the requested windows."""
    command = ComputeIndicatorsCommand(symbol=symbol, periods=parse_periods(periods))
    result = use_case.execute(command)
    return MovingAveragesResponse(
        data=MovingAveragesData(
            sma={
                p: [MovingAverageItem(date=x.date, value=x.value) for x in points]
                for p, points in result.sma.items()
            },
            ema={
                p: [MovingAverageItem(date=x.date, value=x.value) for x in points]
                for p, points in result.ema.items()
            },
        ),
        symbol=result.symbol,
        periods=list(result.periods),
    )


@router.get(
    "/earnings/{symbol}",
    response_model=EarningsResponse,
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Quarterly earnings",
)
def get_earnings(
    symbol: SymbolPath,
    limit: int = Query(8, ge=1, le=40, description="Number of quarters"),
    use_case: GetEarningsUseCase = Depends(get_earnings_use_case),
) -> EarningsResponse:
    """Return reported quarterly EPS, newest first."""
    result = use_case.execute(GetEarningsQuery(symbol=symbol, limit=limit))
    return EarningsResponse(
        data=EarningsData(
            symbol=result.symbol,
            earnings=[
                EarningsItem(
                    start_date=e.start_date,
                    end_date=e.end_date,
                    fiscal_period=e.fiscal_period,
                    fiscal_year=e.fiscal_year,
                    basic_eps=e.basic_eps,
                    diluted_eps=e.diluted_eps,
                    eps_change=e.eps_change,
                )
                for e in result.earnings
            ],
        )
    )


@router.get(
    "/risk-radar/{symbol}",
    response_model=RiskRadarResponse,
    responses={
        429: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="News risk radar",
    description=(
        "Classifies the last week of news about a company into risk "
        "categories and sentiments. Inference-heavy; rate limited."
    ),
)
@limiter.limit(HEAVY_RATE_LIMIT)
async def get_risk_radar(
    request: Request,
    symbol: SymbolPath,
    use_case: AssessRiskUseCase = Depends(get_assess_risk_use_case),
) -> RiskRadarResponse:
    """Return per-category risk summaries for a symbol."""
    result = await use_case.execute(SymbolQuery(symbol=symbol))
    return RiskRadarResponse(
        data={
            name: RiskCategoryItem(
                total_count=c.total_count,
                positive_count=c.positive_count,
                negative_count=c.negative_count,
                neutral_count=c.neutral_count,
                articles=[
                    RiskArticleItem(
                        title=a.title,
                        url=a.url,
                        source=a.source,
                        published_at=a.published_at,
                        sentiment=a.sentiment,
                        description=a.description,
                    )
                    for a in c.articles
                ],
            )
            for name, c in result.categories.items()
        },
        symbol=result.symbol,
        article_count=result.article_count,
    )


@router.get(
    "/rate-limit",
    response_model=RateLimitStatusResponse,
    summary="Rate limit status",
    description="Remaining request budget for the caller. Does not consume any.",
)
def get_rate_limit_status(
    request: Request,
    use_case: GetRateLimitStatusUseCase = Depends(get_rate_limit_status_use_case),
) -> RateLimitStatusResponse:
    """Return the caller's remaining budget."""
    result = use_case.execute(RateLimitStatusQuery(client_key=client_key(request)))
    return RateLimitStatusResponse(
        data=RateLimitStatusData(
            limit=result.limit,
            window_ms=result.window_ms,
            remaining=result.remaining,
            reset_at=result.reset_at,
        )
    )
