"""Company lookup: resolve a query to a ticker and collect its fundamentals."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from stockboard.types import (CompanyOverview, CompanyStat, FrozenModel, Quote,
                              Symbol)

if TYPE_CHECKING:
    from stockboard.data.sources import AlphaVantageSource

# Short letter-only queries are taken as tickers without a search call
TICKER_QUERY = re.compile(r"^[a-zA-Z.\-]{1,6}$")

MISSING = "—"


class CompanyProfile(FrozenModel):
    """Everything the company page shows above the chart."""

    symbol: Symbol
    title: str
    subtitle: str
    stats: list[CompanyStat]
    overview: CompanyOverview
    quote: Quote


def guess_symbol(client: AlphaVantageSource, query: str) -> tuple[Symbol, str | None] | None:
    """Turn a user query into a ticker.

    :param client: Provider used for free-text searches.
    :param query: Ticker or company name.
    :returns: ``(symbol, name)``, where name is only known from a search, or
        None when nothing matches.
    """
    query = query.strip()
    if not query:
        return None
    if TICKER_QUERY.match(query):
        return Symbol(query.upper()), None

    match = client.symbol_search(query)
    if match is None:
        return None
    return Symbol(match.symbol.upper()), match.name


def _format_market_cap(raw: str | None) -> str:
    if not raw:
        return MISSING
    try:
        return f"${int(float(raw)):,}"
    except ValueError:
        return MISSING


def company_stats(overview: CompanyOverview, quote: Quote) -> list[CompanyStat]:
    """Key statistics in display order, with a dash for missing values."""
    price = quote.price if quote.price is not None else 0.0
    rows = [
        ("Price", f"${price:.2f}"),
        ("Market Cap", _format_market_cap(overview.market_cap)),
        ("P/E", overview.pe_ratio or MISSING),
        ("EPS", overview.eps or MISSING),
        ("Beta", overview.beta or MISSING),
        ("Dividend Yield", overview.dividend_yield or MISSING),
        ("52w High", overview.week52_high or MISSING),
        ("52w Low", overview.week52_low or MISSING),
    ]
    return [CompanyStat(label=label, value=value) for label, value in rows]


def lookup_company(client: AlphaVantageSource, query: str) -> CompanyProfile | None:
    """Resolve ``query`` and fetch the company's overview and quote.

    :returns: The profile, or None when the query matches no ticker.
    :raises FetchFailure: If any provider call fails.
    """
    guess = guess_symbol(client, query)
    if guess is None:
        return None
    symbol, name = guess

    overview = client.overview(symbol)
    quote = client.global_quote(symbol)

    sector = overview.sector or "Unknown sector"
    industry = overview.industry or "Unknown industry"
    return CompanyProfile(
        symbol=symbol,
        title=overview.name or name or symbol,
        subtitle=f"{symbol} • {sector} • {industry}",
        stats=company_stats(overview, quote),
        overview=overview,
        quote=quote,
    )


__all__ = ["CompanyProfile", "guess_symbol", "company_stats", "lookup_company"]
