"""
Use case: Get reported quarterly earnings per share.

Input:  GetEarningsQuery (symbol, limit)
Output: EarningsResult, newest quarter first
"""

import logging

from app.application.market.dtos import (
    EarningsItemResult,
    EarningsResult,
    GetEarningsQuery,
)
from app.domain.market.errors import ValidationError
from app.domain.market.ports import EarningsPort

logger = logging.getLogger(__name__)

MAX_QUARTERS = 40


class GetEarningsUseCase:
    """Fetches quarterly EPS and the change against the previous quarter."""

    def __init__(self, earnings: EarningsPort) -> None:
        self._earnings = earnings

    def execute(self, query: GetEarningsQuery) -> EarningsResult:
        if query.limit < 1 or query.limit > MAX_QUARTERS:
            raise ValidationError("limit", f"must be between 1 and {MAX_QUARTERS}")

        reports = self._earnings.get_earnings(query.symbol, query.limit)
        logger.info("Fetched %d earnings reports for %s", len(reports), query.symbol)

        items: list[EarningsItemResult] = []
        for i, report in enumerate(reports):
            older = reports[i + 1] if i + 1 < len(reports) else None
            eps_change = None
            if (
                older is not None
                and report.basic_eps is not None
                and older.basic_eps is not None
            ):
                eps_change = round(report.basic_eps - older.basic_eps, 4)
            items.append(
                EarningsItemResult(
                    start_date=report.start_date,
                    end_date=report.end_date,
                    fiscal_period=report.fiscal_period,
                    fiscal_year=report.fiscal_year,
                    basic_eps=report.basic_eps,
                    diluted_eps=report.diluted_eps,
                    eps_change=eps_change,
                )
            )
        return EarningsResult(symbol=query.symbol, earnings=items)
