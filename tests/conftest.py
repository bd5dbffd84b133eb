"""
Shared pytest fixtures.

All tests run without network access or model downloads: providers are
replaced with in-memory fakes and inference with stubs.
"""

from datetime import date, timedelta
from typing import Optional

import pytest

from app.domain.market.entities import PricePoint
from app.shared.security.rate_limiting import limiter


def _series_from_closes(
    closes: list[Optional[float]], start: date = date(2024, 1, 1)
) -> list[PricePoint]:
    """Build a daily price series from closing prices."""
    return [
        PricePoint(
            date=start + timedelta(days=i),
            open=close,
            high=close,
            low=close,
            close=close,
            volume=1000,
        )
        for i, close in enumerate(closes)
    ]


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def make_series():
    """Factory building a daily price series from closing prices."""
    return _series_from_closes


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _reset_slowapi_limiter():
    """Keep slowapi's per-endpoint counters from leaking between tests."""
    limiter.reset()
    yield
    limiter.reset()
