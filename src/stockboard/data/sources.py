"""Price and market-data sources.

This module provides an abstract interface for daily price sources and
concrete implementations for Alpha Vantage, Yahoo Finance and CSV files.
Alpha Vantage additionally serves quotes, company overviews, symbol search
and news.
"""

from __future__ import annotations

import csv
import logging
import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

import requests
from pydantic import ValidationError

from stockboard.exceptions import ConfigError, FetchFailure
from stockboard.types import (CompanyOverview, NewsArticle, PricePoint,
                              PriceSeries, Quote, Symbol, SymbolMatch)

if TYPE_CHECKING:
    from stockboard.types import AppConfig

logger = logging.getLogger(__name__)


def build_series(symbol: str, rows: Iterable[tuple[str, Any]]) -> PriceSeries:
    """Turn raw ``(date, close)`` pairs into a validated, date-sorted series.

    Rows whose close cannot be read as a number (or is NaN) are dropped. When a
    date repeats, the last row wins.

    :param symbol: Symbol the rows belong to.
    :param rows: Iterable of ``(date, close)`` pairs in any order.
    :returns: PriceSeries sorted by date.
    :raises FetchFailure: If a date or close is malformed beyond repair.
    """
    closes: dict[str, float] = {}
    for date, raw_close in rows:
        try:
            close = float(raw_close)
        except (TypeError, ValueError):
            continue
        if math.isnan(close):
            continue
        closes[str(date)] = close

    try:
        points = tuple(
            PricePoint(date=date, close=closes[date]) for date in sorted(closes)
        )
        return PriceSeries(symbol=Symbol(symbol), points=points)
    except ValidationError as e:
        raise FetchFailure(
            f"Malformed daily series for {symbol}: {e}", symbol=symbol, reason="parse"
        ) from e


class PriceSource(ABC):
    """Abstract base class for daily price sources.

    All price source implementations must inherit from this class and
    implement the `fetch_daily_series` method.
    """

    @abstractmethod
    def fetch_daily_series(self, symbol: str) -> PriceSeries:
        """Fetch recent daily closes for a symbol.

        An empty series means the symbol has no data; provider errors are
        raised instead.

        :param symbol: Symbol to fetch.
        :returns: PriceSeries in chronological order.
        :raises FetchFailure: If fetching or parsing fails.
        """
        ...


class AlphaVantageSource(PriceSource):
    """Client for the Alpha Vantage query API.

    :param api_key: Alpha Vantage API key.
    :param source_params: Optional parameters for configuring the source.
        - timeout: Request timeout in seconds (default: 30)
        - outputsize: "compact" (~100 days) or "full" (default: "compact")
        - base_url: API endpoint (default: the public endpoint)
    :param session: Optional requests session (a new one is created if None).
    """

    BASE_URL = "https://www.alphavantage.co/query"

    # Fields Alpha Vantage uses to report rate limits and request errors
    ERROR_FIELDS = ("Note", "Information", "Error Message")

    def __init__(
        self,
        api_key: str,
        source_params: dict[str, Any] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.params = source_params or {}
        self.timeout = self.params.get("timeout", 30)
        self.outputsize = self.params.get("outputsize", "compact")
        self.base_url = self.params.get("base_url", self.BASE_URL)
        self.session = session or requests.Session()

    def _query(
        self,
        function: str,
        params: dict[str, Any] | None = None,
        symbol: str | None = None,
    ) -> dict[str, Any]:
        """Run one API call and return the decoded JSON body.

        :param function: Alpha Vantage function name.
        :param params: Extra query parameters.
        :param symbol: Symbol the call concerns, attached to failures.
        :raises FetchFailure: On transport errors, non-2xx responses,
            undecodable bodies or provider-reported errors.
        """
        query = {"function": function, "apikey": self.api_key, **(params or {})}
        try:
            response = self.session.get(self.base_url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchFailure(f"{function} request failed: {e}", symbol=symbol) from e

        if not response.ok:
            raise FetchFailure(f"HTTP {response.status_code}", symbol=symbol)

        try:
            data = response.json()
        except ValueError as e:
            raise FetchFailure(
                f"{function} returned a non-JSON body", symbol=symbol, reason="parse"
            ) from e

        if not isinstance(data, dict):
            raise FetchFailure(
                f"{function} returned an unexpected body", symbol=symbol, reason="parse"
            )

        for field in self.ERROR_FIELDS:
            message = data.get(field)
            if message:
                logger.error("Alpha Vantage error for %s: %s", function, message)
                raise FetchFailure(str(message), symbol=symbol, reason="api")

        return data

    def fetch_daily_series(self, symbol: str) -> PriceSeries:
        """Fetch daily closes via ``TIME_SERIES_DAILY``.

        :param symbol: Symbol to fetch.
        :returns: PriceSeries in chronological order.
        :raises FetchFailure: If the call fails or no daily series field exists.
        """
        data = self._query(
            "TIME_SERIES_DAILY",
            {"symbol": symbol, "outputsize": self.outputsize},
            symbol=symbol,
        )

        series_key = next(
            (k for k in data if "time series (daily" in k.lower()), None
        )
        if series_key is None or not isinstance(data[series_key], dict):
            logger.error("No daily series in response for %s: %s", symbol, list(data))
            raise FetchFailure(
                f"Unexpected daily series response for {symbol}",
                symbol=symbol,
                reason="parse",
            )

        rows = []
        for date, values in data[series_key].items():
            if not isinstance(values, dict):
                raise FetchFailure(
                    f"Unexpected entry for {symbol} on {date}: {values!r}",
                    symbol=symbol,
                    reason="parse",
                )
            rows.append((date, values.get("4. close") or "0"))
        series = build_series(symbol, rows)
        logger.info("Fetched %d daily closes for %s", len(series), symbol)
        return series

    def global_quote(self, symbol: str) -> Quote:
        """Fetch the latest quote via ``GLOBAL_QUOTE``.

        :param symbol: Symbol to quote.
        :returns: Quote; price is None when the provider has none.
        """
        data = self._query("GLOBAL_QUOTE", {"symbol": symbol}, symbol=symbol)
        raw = data.get("Global Quote") or {}
        raw_price = raw.get("05. price") or raw.get("05. Price")
        try:
            price = float(raw_price) if raw_price is not None else None
        except ValueError:
            price = None
        return Quote(
            symbol=Symbol(symbol),
            price=price,
            change_percent=raw.get("10. change percent"),
        )

    def overview(self, symbol: str) -> CompanyOverview:
        """Fetch company fundamentals via ``OVERVIEW``.

        :param symbol: Symbol to describe.
        :returns: CompanyOverview with missing fields set to None.
        """
        data = self._query("OVERVIEW", {"symbol": symbol}, symbol=symbol)

        def field(name: str) -> str | None:
            value = data.get(name)
            return str(value) if value not in (None, "") else None

        return CompanyOverview(
            symbol=Symbol(symbol),
            name=field("Name"),
            sector=field("Sector"),
            industry=field("Industry"),
            market_cap=field("MarketCapitalization"),
            pe_ratio=field("PERatio"),
            eps=field("EPS"),
            beta=field("Beta"),
            dividend_yield=field("DividendYield"),
            week52_high=field("52WeekHigh"),
            week52_low=field("52WeekLow"),
        )

    def symbol_search(self, query: str) -> SymbolMatch | None:
        """Return the best match for a free-text query, or None.

        :param query: Company name or keywords.
        """
        data = self._query("SYMBOL_SEARCH", {"keywords": query})
        matches = data.get("bestMatches") or []
        if not matches:
            return None

        best = matches[0]
        return SymbolMatch(
            symbol=Symbol(best.get("1. symbol", "")),
            name=best.get("2. name", ""),
            region=best.get("4. region"),
        )

    def news(
        self,
        tickers: list[str] | None = None,
        topics: list[str] | None = None,
        limit: int = 20,
    ) -> list[NewsArticle]:
        """Fetch the latest news via ``NEWS_SENTIMENT``.

        :param tickers: Restrict to articles mentioning these tickers.
        :param topics: Restrict to these provider topics.
        :param limit: Maximum number of articles.
        :returns: Articles, newest first as sorted by the provider.
        """
        params: dict[str, Any] = {"sort": "LATEST", "limit": str(limit)}
        if tickers:
            params["tickers"] = ",".join(tickers)
        if topics:
            params["topics"] = ",".join(topics)

        data = self._query("NEWS_SENTIMENT", params)
        feed = data.get("feed") or []
        return [
            NewsArticle(
                title=item.get("title"),
                url=item.get("url"),
                source=item.get("source"),
                source_domain=item.get("source_domain"),
                summary=item.get("summary") or item.get("snippet"),
                time_published=item.get("time_published") or "",
                sentiment_label=item.get("overall_sentiment_label"),
            )
            for item in feed
        ]


class YahooPriceSource(PriceSource):
    """Price source that fetches daily closes from Yahoo Finance via yfinance.

    :param source_params: Optional parameters for configuring the source.
        - period: History to request (default: "6mo")
        - timeout: Request timeout in seconds (default: 30)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.period = self.params.get("period", "6mo")
        self.timeout = self.params.get("timeout", 30)

    def fetch_daily_series(self, symbol: str) -> PriceSeries:
        """Fetch daily closes from Yahoo Finance.

        :param symbol: Symbol to fetch.
        :returns: PriceSeries (empty when Yahoo has no data).
        :raises FetchFailure: If yfinance is missing or the download fails.
        """
        try:
            import yfinance as yf
        except ImportError as e:
            raise FetchFailure(
                "yfinance is not installed. Install it with: pip install yfinance",
                symbol=symbol,
            ) from e

        try:
            df = yf.Ticker(symbol).history(
                period=self.period, interval="1d", timeout=self.timeout
            )
        except Exception as e:
            raise FetchFailure(
                f"Failed to fetch data for symbol '{symbol}': {e}", symbol=symbol
            ) from e

        if df.empty:
            logger.warning("Yahoo returned no data for %s", symbol)
            return PriceSeries(symbol=Symbol(symbol))

        if "Close" not in df.columns:
            raise FetchFailure(
                f"No Close column in Yahoo data for {symbol}",
                symbol=symbol,
                reason="parse",
            )

        rows = (
            (timestamp.strftime("%Y-%m-%d"), close)
            for timestamp, close in df["Close"].items()
        )
        series = build_series(symbol, rows)
        logger.info("Fetched %d daily closes for %s", len(series), symbol)
        return series


class CSVPriceSource(PriceSource):
    """Price source that reads daily closes from a CSV file.

    Expected CSV format (default columns):
    - symbol: Stock symbol
    - date: ``YYYY-MM-DD`` calendar day
    - close: Closing price

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - symbol_col: Column name for symbol (default: "symbol")
        - date_col: Column name for date (default: "date")
        - close_col: Column name for close price (default: "close")
        - delimiter: CSV delimiter (default: ",")
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise ConfigError("CSVPriceSource requires 'file_path' in source_params")

        self.symbol_col = self.params.get("symbol_col", "symbol")
        self.date_col = self.params.get("date_col", "date")
        self.close_col = self.params.get("close_col", "close")
        self.delimiter = self.params.get("delimiter", ",")

    def fetch_daily_series(self, symbol: str) -> PriceSeries:
        """Read the rows for one symbol from the CSV file.

        :param symbol: Symbol to filter on (case-insensitive).
        :returns: PriceSeries (empty when the file has no rows for it).
        :raises FetchFailure: If the file is missing or unreadable.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise FetchFailure(f"CSV file not found: {self.file_path}", symbol=symbol)

        wanted = symbol.upper()
        rows: list[tuple[str, Any]] = []
        try:
            with open(path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)
                for row in reader:
                    if (row.get(self.symbol_col) or "").upper() != wanted:
                        continue
                    date = row.get(self.date_col)
                    if not date:
                        continue
                    rows.append((date.strip(), row.get(self.close_col)))
        except csv.Error as e:
            raise FetchFailure(f"CSV parsing error: {e}", symbol=symbol, reason="parse") from e
        except OSError as e:
            raise FetchFailure(f"Failed to read CSV file: {e}", symbol=symbol) from e

        return build_series(symbol, rows)


def resolve_price_source(config: AppConfig) -> PriceSource:
    """Construct a price source from configuration.

    :param config: AppConfig with data_source and source_params.
    :returns: PriceSource instance for the specified type.
    :raises ConfigError: If data_source type is unrecognized.
    """
    source_type = config.data_source.lower()

    if source_type == "alphavantage":
        return AlphaVantageSource(config.api_key, config.source_params)
    elif source_type == "yahoo":
        return YahooPriceSource(config.source_params)
    elif source_type == "csv":
        return CSVPriceSource(config.source_params)
    else:
        raise ConfigError(
            f"Unrecognized data source type: '{config.data_source}'. "
            f"Supported types: alphavantage, yahoo, csv"
        )
