"""Shared fixtures for the dashboard test suite."""

from __future__ import annotations

import threading
import time
from typing import Callable, Sequence

import pandas as pd
import pytest

from stockboard.data.sources import PriceSource
from stockboard.exceptions import FetchFailure
from stockboard.types import PricePoint, PriceSeries, Symbol


def business_days(end: str, periods: int) -> list[str]:
    """Consecutive weekday dates ending at ``end``."""
    return pd.bdate_range(end=end, periods=periods).strftime("%Y-%m-%d").tolist()


def make_series(
    symbol: str,
    closes: Sequence[float],
    dates: Sequence[str] | None = None,
) -> PriceSeries:
    """Build a series; dates default to weekdays starting 2024-01-02."""
    if dates is None:
        dates = pd.bdate_range(start="2024-01-02", periods=len(closes)).strftime(
            "%Y-%m-%d"
        ).tolist()
    return PriceSeries(
        symbol=Symbol(symbol),
        points=tuple(PricePoint(date=d, close=c) for d, c in zip(dates, closes)),
    )


class StaticSource(PriceSource):
    """In-memory price source that records calls and peak fetch overlap.

    :param series: Series returned per symbol (unknown symbols get an empty one).
    :param fail: Symbols whose fetch raises FetchFailure.
    :param delays: Seconds to block per symbol before answering.
    """

    def __init__(
        self,
        series: dict[str, PriceSeries] | None = None,
        fail: Sequence[str] = (),
        delays: dict[str, float] | None = None,
    ) -> None:
        self.series = dict(series or {})
        self.fail = set(fail)
        self.delays = delays or {}
        self.calls: list[str] = []
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def fetch_daily_series(self, symbol: str) -> PriceSeries:
        with self._lock:
            self.calls.append(symbol)
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(self.delays.get(symbol, 0.0))
        finally:
            with self._lock:
                self.active -= 1
        if symbol in self.fail:
            raise FetchFailure("rate limited", symbol=symbol, reason="api")
        return self.series.get(symbol, PriceSeries(symbol=Symbol(symbol)))


@pytest.fixture
def series_factory() -> Callable[..., PriceSeries]:
    """Factory building PriceSeries from closes (and optional dates)."""
    return make_series


@pytest.fixture
def calendar() -> list[str]:
    """120 weekdays ending 2024-06-03, used as the SPY calendar."""
    return business_days("2024-06-03", 120)


@pytest.fixture
def market(calendar: list[str]) -> dict[str, PriceSeries]:
    """Benchmarks and two stocks sharing the SPY calendar.

    ``MSFT`` misses every tenth trading day.
    """
    n = len(calendar)
    msft_dates = [d for i, d in enumerate(calendar) if i % 10 != 5]
    return {
        "SPY": make_series("SPY", [400.0 + i for i in range(n)], calendar),
        "DIA": make_series("DIA", [300.0 + i * 0.5 for i in range(n)], calendar),
        "QQQ": make_series("QQQ", [350.0 + i * 2 for i in range(n)], calendar),
        "AAPL": make_series("AAPL", [100.0 + i for i in range(n)], calendar),
        "MSFT": make_series("MSFT", [200.0 + i for i in range(len(msft_dates))], msft_dates),
    }


@pytest.fixture
def source_factory() -> type[StaticSource]:
    """The StaticSource class, for tests that need custom failures or delays."""
    return StaticSource


@pytest.fixture
def source(market: dict[str, PriceSeries]) -> StaticSource:
    return StaticSource(market)
