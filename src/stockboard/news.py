"""Headline retrieval for the portfolio, the market and single tickers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from stockboard.types import FrozenModel, NewsArticle

if TYPE_CHECKING:
    from stockboard.data.sources import AlphaVantageSource

logger = logging.getLogger(__name__)

# Only the first few holdings are queried to stay inside the free API tier
PORTFOLIO_NEWS_TICKERS = 3
PORTFOLIO_NEWS_PER_TICKER = 8
MAX_ARTICLES = 20
INITIAL_VISIBLE = 8

MARKET_TOPICS = ("financial_markets", "economy_macro")


def portfolio_news(client: AlphaVantageSource, symbols: Sequence[str]) -> list[NewsArticle]:
    """Latest headlines for the first few portfolio holdings.

    Each ticker is queried on its own; the results are merged, sorted newest
    first by publication timestamp and capped.

    :param client: News provider.
    :param symbols: Portfolio symbols.
    :returns: Up to ``MAX_ARTICLES`` articles (empty for an empty portfolio).
    :raises FetchFailure: If any per-ticker query fails.
    """
    merged: list[NewsArticle] = []
    for symbol in list(symbols)[:PORTFOLIO_NEWS_TICKERS]:
        merged.extend(client.news(tickers=[symbol], limit=PORTFOLIO_NEWS_PER_TICKER))

    merged.sort(key=lambda a: a.time_published, reverse=True)
    logger.debug("Merged %d portfolio articles", len(merged))
    return merged[:MAX_ARTICLES]


def market_news(client: AlphaVantageSource) -> list[NewsArticle]:
    """Latest general market and macro headlines."""
    return client.news(topics=list(MARKET_TOPICS), limit=MAX_ARTICLES)


def ticker_news(client: AlphaVantageSource, symbol: str) -> list[NewsArticle]:
    """Latest headlines mentioning ``symbol``."""
    return client.news(tickers=[symbol.upper()], limit=MAX_ARTICLES)


class NewsCard(FrozenModel):
    """Display fields of one article with fallbacks filled in."""

    title: str
    meta: str
    tag: str
    summary: str
    url: str


def news_card(article: NewsArticle) -> NewsCard:
    """Build the display fields of an article."""
    source = article.source or article.source_domain or "Unknown source"
    date = article.published_date
    return NewsCard(
        title=article.title or "Untitled story",
        meta=f"{source} • {date}" if date else source,
        tag=(article.sentiment_label or "Neutral").upper(),
        summary=article.summary or "",
        url=article.url or "#",
    )


def paginate(
    articles: Sequence[NewsArticle],
    expanded: bool = False,
    initial: int = INITIAL_VISIBLE,
    max_total: int = MAX_ARTICLES,
) -> tuple[list[NewsArticle], int]:
    """Split articles into the visible part and a count of hidden ones.

    :param articles: Articles in display order.
    :param expanded: Whether the user asked to see everything.
    :param initial: Articles shown before expanding.
    :param max_total: Hard cap on articles ever shown.
    :returns: ``(visible, hidden_count)``.
    """
    trimmed = list(articles[:max_total])
    visible = trimmed if expanded else trimmed[:initial]
    return visible, len(trimmed) - len(visible)


__all__ = [
    "MARKET_TOPICS",
    "portfolio_news",
    "market_news",
    "ticker_news",
    "NewsCard",
    "news_card",
    "paginate",
]
