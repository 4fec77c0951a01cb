"""Core type definitions for the dashboard engine.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, NewType

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Type aliases for domain-specific identifiers
Symbol = NewType("Symbol", str)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_calendar_day(value: str) -> bool:
    """Return True if ``value`` is a real day written as fixed-width ``YYYY-MM-DD``."""
    if not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


class MutableModel(BaseModel):
    """Base model for mutable state objects."""

    model_config = ConfigDict(validate_assignment=True)


# ---------------------------------------------------------------------------
# Price Data Types
# ---------------------------------------------------------------------------


class PricePoint(FrozenModel):
    """Daily close for a single trading day.

    :param date: Calendar day in ``YYYY-MM-DD`` form.
    :param close: Closing price (non-negative).
    """

    date: str
    close: float = Field(ge=0.0)

    @field_validator("date")
    @classmethod
    def _check_date(cls, v: str) -> str:
        if not is_calendar_day(v):
            raise ValueError(f"date must be YYYY-MM-DD, got {v!r}")
        return v


class PriceSeries(FrozenModel):
    """Ordered daily close series for one symbol.

    Points are strictly increasing by date with one point per trading day.
    Gaps in the source data are kept as they are.

    :param symbol: Symbol the series belongs to.
    :param points: Price points, oldest first.
    """

    symbol: Symbol
    points: tuple[PricePoint, ...] = ()

    @model_validator(mode="after")
    def _check_ordering(self) -> "PriceSeries":
        for prev, cur in zip(self.points, self.points[1:]):
            if cur.date <= prev.date:
                raise ValueError(
                    f"{self.symbol}: dates must be strictly increasing "
                    f"({prev.date} then {cur.date})"
                )
        return self

    def __len__(self) -> int:
        return len(self.points)

    @property
    def dates(self) -> list[str]:
        return [p.date for p in self.points]

    @property
    def closes(self) -> list[float]:
        return [p.close for p in self.points]

    def close_by_date(self) -> dict[str, float]:
        """Map each date in the series to its close."""
        return {p.date: p.close for p in self.points}


class DateWindow(FrozenModel):
    """Inclusive calendar-day window.

    :param start: First day of the window (inclusive).
    :param end: Last day of the window (inclusive).
    """

    start: str
    end: str

    @model_validator(mode="after")
    def _check_bounds(self) -> "DateWindow":
        for value in (self.start, self.end):
            if not is_calendar_day(value):
                raise ValueError(f"window bounds must be YYYY-MM-DD, got {value!r}")
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")
        return self

    def contains(self, date: str) -> bool:
        return self.start <= date <= self.end


class IndexedPoint(FrozenModel):
    """Point of a series rebased so the first in-window value is 100.

    :param date: Calendar day.
    :param value: Indexed value.
    """

    date: str
    value: float


# ---------------------------------------------------------------------------
# Render-ready Types
# ---------------------------------------------------------------------------


class NormalizedDataset(FrozenModel):
    """Render-ready indexed series.

    ``values`` is positional to ``dates``. Once aligned to a chart's label
    sequence, ``dates`` equals the labels and a missing point is ``None``.

    :param label: Legend label.
    :param dates: Dates the values belong to.
    :param values: Indexed values, or None where the date has no data.
    :param style: Opaque presentation hints for the renderer.
    """

    label: str
    dates: list[str] = Field(default_factory=list)
    values: list[float | None] = Field(default_factory=list)
    style: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_lengths(self) -> "NormalizedDataset":
        if len(self.dates) != len(self.values):
            raise ValueError(
                f"dataset '{self.label}' has {len(self.values)} values "
                f"for {len(self.dates)} dates"
            )
        return self


class ChartData(FrozenModel):
    """Label sequence plus the datasets aligned to it.

    :param labels: Shared date labels.
    :param datasets: Datasets whose values are positional to ``labels``.
    """

    labels: list[str] = Field(default_factory=list)
    datasets: list[NormalizedDataset] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Company / News Types
# ---------------------------------------------------------------------------


class Quote(FrozenModel):
    """Latest quote for a symbol.

    :param symbol: Quoted symbol.
    :param price: Last traded price, or None if unavailable.
    :param change_percent: Day change as reported by the provider.
    """

    symbol: Symbol
    price: float | None = None
    change_percent: str | None = None


class CompanyOverview(FrozenModel):
    """Company fundamentals as reported by the provider.

    Numeric fields are kept as the provider's strings; missing values are None.
    """

    symbol: Symbol
    name: str | None = None
    sector: str | None = None
    industry: str | None = None
    market_cap: str | None = None
    pe_ratio: str | None = None
    eps: str | None = None
    beta: str | None = None
    dividend_yield: str | None = None
    week52_high: str | None = None
    week52_low: str | None = None


class SymbolMatch(FrozenModel):
    """Best symbol-search match.

    :param symbol: Matched ticker.
    :param name: Company name.
    :param region: Listing region.
    """

    symbol: Symbol
    name: str
    region: str | None = None


class NewsArticle(FrozenModel):
    """Single news item.

    :param title: Headline.
    :param url: Link to the article.
    :param source: Publisher name.
    :param source_domain: Publisher domain, used when ``source`` is absent.
    :param summary: Short summary.
    :param time_published: Provider timestamp, ``YYYYMMDDTHHMMSS``.
    :param sentiment_label: Overall sentiment label.
    """

    title: str | None = None
    url: str | None = None
    source: str | None = None
    source_domain: str | None = None
    summary: str | None = None
    time_published: str = ""
    sentiment_label: str | None = None

    @property
    def published_date(self) -> str:
        """Publication day as ``YYYY-MM-DD``, or an empty string."""
        ts = self.time_published
        if len(ts) < 8:
            return ""
        return f"{ts[0:4]}-{ts[4:6]}-{ts[6:8]}"


class CompanyStat(FrozenModel):
    """Labelled statistic for display."""

    label: str
    value: str


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class AppConfig(FrozenModel):
    """Application configuration.

    :param data_source: Price source type ("alphavantage", "yahoo" or "csv").
    :param api_key: Alpha Vantage API key.
    :param source_params: Provider-specific parameters.
    :param portfolio_path: JSON file holding the tracked tickers.
    :param benchmarks: Benchmarks drawn next to the portfolio, in display order.
    :param lookback_days: Default window length in trading days.
    :param log_level: Logging level.
    """

    data_source: str = "alphavantage"
    api_key: str = ""
    source_params: dict[str, Any] = Field(default_factory=dict)
    portfolio_path: str = "~/.stockboard/portfolio.json"
    benchmarks: list[Symbol] = Field(
        default_factory=lambda: [Symbol("SPY"), Symbol("DIA"), Symbol("QQQ")]
    )
    lookback_days: int = 90
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Type aliases
    "Symbol",
    "is_calendar_day",
    # Base models
    "FrozenModel",
    "MutableModel",
    # Price data
    "PricePoint",
    "PriceSeries",
    "DateWindow",
    "IndexedPoint",
    # Render-ready
    "NormalizedDataset",
    "ChartData",
    # Company / news
    "Quote",
    "CompanyOverview",
    "SymbolMatch",
    "NewsArticle",
    "CompanyStat",
    # Configuration
    "AppConfig",
]
