"""Tracked ticker list and its JSON persistence."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import field_validator

from stockboard.exceptions import InvalidTicker
from stockboard.types import FrozenModel, Symbol

logger = logging.getLogger(__name__)

TICKER_PATTERN = re.compile(r"^[A-Z.\-]{1,6}$")


def normalize_ticker(raw: str) -> Symbol:
    """Strip and upper-case a ticker, rejecting anything not ticker-shaped.

    :param raw: User input such as ``" aapl "``.
    :returns: Normalized symbol such as ``"AAPL"``.
    :raises InvalidTicker: If the result is not 1-6 letters, dots or dashes.
    """
    symbol = raw.strip().upper()
    if not TICKER_PATTERN.match(symbol):
        raise InvalidTicker(
            f"'{raw.strip()}' is not a simple ticker symbol like AAPL or MSFT"
        )
    return Symbol(symbol)


class Portfolio(FrozenModel):
    """Ordered set of unique upper-case ticker symbols.

    Instances are immutable; :meth:`add` and :meth:`remove` return new ones.

    :param symbols: Tickers in the order they were added.
    """

    symbols: tuple[Symbol, ...] = ()

    @field_validator("symbols")
    @classmethod
    def _normalized_and_unique(cls, v: tuple[Symbol, ...]) -> tuple[Symbol, ...]:
        try:
            symbols = tuple(normalize_ticker(s) for s in v)
        except InvalidTicker as e:
            raise ValueError(str(e)) from e
        if len(set(symbols)) != len(symbols):
            raise ValueError("portfolio symbols must be unique")
        return symbols

    def __len__(self) -> int:
        return len(self.symbols)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and symbol.upper() in self.symbols

    def add(self, raw: str) -> "Portfolio":
        """Return a portfolio with ``raw`` appended (no-op if already tracked).

        :raises InvalidTicker: If ``raw`` is not ticker-shaped.
        """
        symbol = normalize_ticker(raw)
        if symbol in self.symbols:
            return self
        return Portfolio(symbols=(*self.symbols, symbol))

    def remove(self, symbol: str) -> "Portfolio":
        """Return a portfolio without ``symbol`` (no-op if not tracked)."""
        target = symbol.strip().upper()
        return Portfolio(symbols=tuple(s for s in self.symbols if s != target))


class PortfolioStore:
    """Reads and writes the tracked tickers as a JSON list.

    :param path: JSON file location; ``~`` is expanded.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> Portfolio:
        """Load the stored portfolio.

        A missing file is an empty portfolio. Unreadable content is logged
        and also treated as empty; invalid or duplicate entries are skipped.
        """
        if not self.path.exists():
            return Portfolio()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Unable to read portfolio from %s: %s", self.path, e)
            return Portfolio()

        if not isinstance(raw, list):
            logger.warning("Ignoring portfolio file %s: not a JSON list", self.path)
            return Portfolio()

        portfolio = Portfolio()
        for item in raw:
            try:
                portfolio = portfolio.add(str(item))
            except InvalidTicker:
                logger.warning("Skipping invalid ticker %r in %s", item, self.path)
        return portfolio

    def save(self, portfolio: Portfolio) -> None:
        """Write ``portfolio`` to disk, creating parent directories."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(list(portfolio.symbols)), encoding="utf-8")


__all__ = ["TICKER_PATTERN", "normalize_ticker", "Portfolio", "PortfolioStore"]
