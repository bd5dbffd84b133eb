"""
Use case: Report a caller's remaining request budget.

Reads the governor without recording a request.

Input:  RateLimitStatusQuery (client_key)
Output: RateLimitStatusResult
"""

from app.application.market.dtos import RateLimitStatusQuery, RateLimitStatusResult
from app.shared.security.rate_governor import RateGovernor


class GetRateLimitStatusUseCase:
    """Reports the governor's limits and a client's current budget."""

    def __init__(self, governor: RateGovernor) -> None:
        self._governor = governor

    def execute(self, query: RateLimitStatusQuery) -> RateLimitStatusResult:
        """Return the remaining budget for the query's client key."""
        decision = self._governor.remaining(query.client_key)
        return RateLimitStatusResult(
            limit=self._governor.default_limit,
            window_ms=self._governor.default_window_ms,
            remaining=decision.remaining,
            reset_at=decision.reset_at,
        )
