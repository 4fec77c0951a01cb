"""Tests for core type definitions."""

import pytest
from pydantic import ValidationError

from stockboard.types import (AppConfig, ChartData, DateWindow, IndexedPoint,
                              NewsArticle, NormalizedDataset, PricePoint,
                              PriceSeries, Symbol)

# ---------------------------------------------------------------------------
# Price Types
# ---------------------------------------------------------------------------


def test_price_point_fields() -> None:
    """PricePoint should store date and close."""
    point = PricePoint(date="2024-01-02", close=187.5)
    assert point.date == "2024-01-02"
    assert point.close == 187.5


def test_price_point_is_immutable() -> None:
    """PricePoint is frozen once produced."""
    point = PricePoint(date="2024-01-02", close=1.0)
    with pytest.raises(ValidationError):
        point.close = 2.0  # type: ignore[misc]


def test_price_point_rejects_bad_date_and_negative_close() -> None:
    """Dates must be YYYY-MM-DD and closes non-negative."""
    with pytest.raises(ValidationError):
        PricePoint(date="2024-1-2", close=1.0)
    with pytest.raises(ValidationError):
        PricePoint(date="2024-02-30", close=1.0)
    with pytest.raises(ValidationError):
        PricePoint(date="2024-01-02", close=-1.0)


def test_price_series_requires_strictly_increasing_dates() -> None:
    """Out-of-order or duplicate dates are rejected."""
    a = PricePoint(date="2024-01-02", close=1.0)
    b = PricePoint(date="2024-01-03", close=2.0)

    series = PriceSeries(symbol=Symbol("AAPL"), points=(a, b))
    assert series.dates == ["2024-01-02", "2024-01-03"]
    assert series.closes == [1.0, 2.0]
    assert len(series) == 2

    with pytest.raises(ValidationError, match="strictly increasing"):
        PriceSeries(symbol=Symbol("AAPL"), points=(b, a))
    with pytest.raises(ValidationError, match="strictly increasing"):
        PriceSeries(symbol=Symbol("AAPL"), points=(a, a))


def test_price_series_close_by_date() -> None:
    """close_by_date maps each date to its close."""
    series = PriceSeries(
        symbol=Symbol("AAPL"),
        points=[PricePoint(date="2024-01-02", close=5.0)],
    )
    assert series.close_by_date() == {"2024-01-02": 5.0}


def test_empty_series_has_no_dates() -> None:
    series = PriceSeries(symbol=Symbol("XYZ"))
    assert series.dates == []
    assert len(series) == 0


# ---------------------------------------------------------------------------
# Window / Dataset Types
# ---------------------------------------------------------------------------


def test_date_window_bounds() -> None:
    """DateWindow enforces start <= end and contains is inclusive."""
    window = DateWindow(start="2024-01-02", end="2024-01-31")
    assert window.contains("2024-01-02")
    assert window.contains("2024-01-31")
    assert not window.contains("2024-02-01")

    DateWindow(start="2024-01-02", end="2024-01-02")
    with pytest.raises(ValidationError, match="after end"):
        DateWindow(start="2024-02-01", end="2024-01-01")


def test_indexed_point() -> None:
    point = IndexedPoint(date="2024-01-02", value=100.0)
    assert point.value == 100.0


def test_normalized_dataset_length_must_match() -> None:
    """Values are positional to dates."""
    ds = NormalizedDataset(label="SPY", dates=["2024-01-02"], values=[100.0])
    assert ds.style == {}

    with pytest.raises(ValidationError, match="has 2 values for 1 dates"):
        NormalizedDataset(label="SPY", dates=["2024-01-02"], values=[100.0, 101.0])


def test_normalized_dataset_allows_gaps() -> None:
    """None marks a label without data."""
    ds = NormalizedDataset(label="X", dates=["a", "b"], values=[100.0, None])
    assert ds.values[1] is None


def test_chart_data_defaults() -> None:
    chart = ChartData()
    assert chart.labels == []
    assert chart.datasets == []


# ---------------------------------------------------------------------------
# Supplemental Types
# ---------------------------------------------------------------------------


def test_news_article_published_date() -> None:
    """Provider timestamps render as calendar days."""
    assert NewsArticle(time_published="20240603T153000").published_date == "2024-06-03"
    assert NewsArticle().published_date == ""


def test_app_config_defaults() -> None:
    config = AppConfig()
    assert config.data_source == "alphavantage"
    assert config.benchmarks == ["SPY", "DIA", "QQQ"]
    assert config.lookback_days == 90
