"""
Use case: Get descriptive fundamentals for a company.

Input:  SymbolQuery
Output: OverviewResult
"""

from app.application.market.dtos import OverviewResult, SymbolQuery
from app.domain.market.ports import MarketDataPort


class GetCompanyOverviewUseCase:
    """Returns name, description, sector, industry and valuation figures."""

    def __init__(self, market_data: MarketDataPort) -> None:
        self._market_data = market_data

    def execute(self, query: SymbolQuery) -> OverviewResult:
        overview = self._market_data.get_company_overview(query.symbol)
        return OverviewResult(
            symbol=overview.symbol,
            name=overview.name,
            description=overview.description,
            sector=overview.sector,
            industry=overview.industry,
            market_cap=overview.market_cap,
            pe_ratio=overview.pe_ratio,
        )
