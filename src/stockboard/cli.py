#!/usr/bin/env python3
"""Command-line interface for the portfolio dashboard."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stockboard.types import AppConfig, ChartData


def _load(args: argparse.Namespace) -> AppConfig | None:
    """Load configuration and set up logging; print and return None on error."""
    from stockboard.config import load_config
    from stockboard.exceptions import ConfigError
    from stockboard.log import setup_logging

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return None

    setup_logging(args.log_level or config.log_level)
    return config


def _benchmarks(args: argparse.Namespace, config: AppConfig) -> list[str]:
    if args.bench is None:
        return list(config.benchmarks)
    return [b for b in args.bench if b.upper() != "NONE"]


def print_chart(chart: ChartData, show_table: bool = False) -> None:
    """Print the change over the window per dataset and optionally every row."""
    if not chart.labels:
        print("   (no trading days in range)")
        return

    print(f"Window:    {chart.labels[0]} to {chart.labels[-1]} ({len(chart.labels)} days)")
    print()
    print(f"{'Series':<12} {'Start':>9} {'End':>9} {'Change':>9}")
    print("-" * 42)
    for ds in chart.datasets:
        present = [v for v in ds.values if v is not None]
        if not present:
            print(f"{ds.label:<12} {'N/A':>9}")
            continue
        first, last = present[0], present[-1]
        change = last / first - 1
        print(f"{ds.label:<12} {first:>9.2f} {last:>9.2f} {change:>+9.2%}")

    if show_table:
        print()
        header = f"{'Date':<11}" + "".join(f"{ds.label:>11}" for ds in chart.datasets)
        print(header)
        print("-" * len(header))
        for i, label in enumerate(chart.labels):
            cells = []
            for ds in chart.datasets:
                value = ds.values[i]
                cells.append(f"{value:>11.2f}" if value is not None else f"{'-':>11}")
            print(f"{label:<11}" + "".join(cells))


def cmd_portfolio(args: argparse.Namespace) -> int:
    """List, add or remove tracked tickers."""
    from stockboard.exceptions import InvalidTicker
    from stockboard.portfolio import PortfolioStore

    config = _load(args)
    if config is None:
        return 1

    store = PortfolioStore(config.portfolio_path)
    portfolio = store.load()

    if args.action == "add":
        for raw in args.symbols:
            try:
                portfolio = portfolio.add(raw)
            except InvalidTicker as e:
                print(f"Error: {e}")
                return 1
        store.save(portfolio)
    elif args.action == "remove":
        for symbol in args.symbols:
            portfolio = portfolio.remove(symbol)
        store.save(portfolio)

    if not portfolio.symbols:
        print("No tickers yet. Add one to begin.")
        return 0

    print("Portfolio: " + ", ".join(portfolio.symbols))
    return 0


def cmd_chart(args: argparse.Namespace) -> int:
    """Show portfolio performance against the benchmarks."""
    from stockboard.data import SeriesCache, resolve_price_source
    from stockboard.exceptions import ConfigError
    from stockboard.portfolio import PortfolioStore
    from stockboard.session import ChartStatus, PortfolioChartSession, WindowInputs

    config = _load(args)
    if config is None:
        return 1

    try:
        source = resolve_price_source(config)
    except ConfigError as e:
        print(f"Data source error: {e}")
        return 1

    portfolio = PortfolioStore(config.portfolio_path).load()
    session = PortfolioChartSession(
        SeriesCache(source),
        WindowInputs(start=args.start or "", end=args.end or ""),
        lookback=config.lookback_days,
    )

    print("=" * 60)
    print("PORTFOLIO PERFORMANCE")
    print("=" * 60)
    print(f"Tickers:   {', '.join(portfolio.symbols) or '(none)'}")

    try:
        update = asyncio.run(session.refresh(portfolio, _benchmarks(args, config)))
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    if update.chart is not None:
        print_chart(update.chart, args.table)
    if update.message:
        print(f"\n{update.message}")

    return 0 if update.applied else 1


def cmd_search(args: argparse.Namespace) -> int:
    """Look up a company, chart it and list related headlines."""
    from stockboard.data import AlphaVantageSource, SeriesCache, resolve_price_source
    from stockboard.exceptions import ConfigError, FetchFailure
    from stockboard.news import news_card, ticker_news
    from stockboard.search import lookup_company
    from stockboard.session import SearchChartSession, WindowInputs

    config = _load(args)
    if config is None:
        return 1

    client = AlphaVantageSource(config.api_key, config.source_params)
    try:
        profile = lookup_company(client, args.query)
    except FetchFailure as e:
        print(f"There was a problem searching (free API limits are easy to hit): {e}")
        return 1

    if profile is None:
        print("No matching ticker found.")
        return 1

    print("=" * 60)
    print(profile.title)
    print(profile.subtitle)
    print("=" * 60)
    for stat in profile.stats:
        print(f"{stat.label + ':':<16} {stat.value}")

    try:
        source = resolve_price_source(config)
    except ConfigError as e:
        print(f"Data source error: {e}")
        return 1

    session = SearchChartSession(
        SeriesCache(source),
        WindowInputs(start=args.start or "", end=args.end or ""),
        lookback=config.lookback_days,
    )
    print("\n📈 Performance")
    try:
        update = asyncio.run(session.refresh(profile.symbol, _benchmarks(args, config)))
    except ConfigError as e:
        print(f"Error: {e}")
        return 1
    if update.chart is not None:
        print_chart(update.chart, args.table)
    if update.message:
        print(update.message)

    if args.no_news:
        return 0

    print(f"\n📰 Headlines mentioning {profile.symbol}")
    try:
        articles = ticker_news(client, profile.symbol)
    except FetchFailure:
        print("Unable to load news for this ticker.")
        return 0

    if not articles:
        print("No recent headlines found.")
    for article in articles:
        card = news_card(article)
        print(f"\n[{card.tag}] {card.title}\n   {card.meta}\n   {card.url}")

    return 0


def cmd_news(args: argparse.Namespace) -> int:
    """Show headlines for the portfolio or the market."""
    from stockboard.data import AlphaVantageSource
    from stockboard.exceptions import FetchFailure
    from stockboard.news import market_news, news_card, paginate, portfolio_news
    from stockboard.portfolio import PortfolioStore

    config = _load(args)
    if config is None:
        return 1

    client = AlphaVantageSource(config.api_key, config.source_params)

    if args.market:
        title = "MARKET NEWS"
        try:
            articles = market_news(client)
        except FetchFailure:
            print("Unable to load market news right now.")
            return 1
        empty_message = "No recent market stories found."
    else:
        title = "PORTFOLIO NEWS"
        portfolio = PortfolioStore(config.portfolio_path).load()
        if not portfolio.symbols:
            print("Add tickers to your portfolio to see related headlines.")
            return 0
        try:
            articles = portfolio_news(client, portfolio.symbols)
        except FetchFailure:
            print("Unable to load portfolio news right now.")
            return 1
        empty_message = "No recent portfolio headlines found."

    print("=" * 60)
    print(title)
    print("=" * 60)

    if not articles:
        print(empty_message)
        return 0

    visible, hidden = paginate(articles, expanded=args.all)
    for article in visible:
        card = news_card(article)
        print(f"\n[{card.tag}] {card.title}\n   {card.meta}")
        if card.summary:
            print(f"   {card.summary}")
        print(f"   {card.url}")

    if hidden:
        print(f"\n... and {hidden} more (use --all to show them)")

    return 0


def _add_window_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--start", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "--bench",
        nargs="*",
        metavar="SYMBOL",
        help="Benchmarks to draw: SPY DIA QQQ (default: from config; 'none' for none)",
    )
    parser.add_argument(
        "--table", action="store_true", help="Print every indexed value"
    )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Portfolio vs. benchmark dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", help="Path to YAML configuration file")
    parser.add_argument("--log-level", help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Portfolio command
    portfolio_parser = subparsers.add_parser("portfolio", help="Manage tracked tickers")
    portfolio_parser.add_argument(
        "action", nargs="?", default="list", choices=["list", "add", "remove"]
    )
    portfolio_parser.add_argument("symbols", nargs="*", help="Ticker symbols")

    # Chart command
    chart_parser = subparsers.add_parser(
        "chart", help="Compare the portfolio with the benchmarks"
    )
    _add_window_args(chart_parser)

    # Search command
    search_parser = subparsers.add_parser("search", help="Look up a company")
    search_parser.add_argument("query", help="Ticker or company name")
    _add_window_args(search_parser)
    search_parser.add_argument(
        "--no-news", action="store_true", help="Skip the headlines"
    )

    # News command
    news_parser = subparsers.add_parser("news", help="Show headlines")
    news_parser.add_argument(
        "--market", action="store_true", help="Market news instead of portfolio news"
    )
    news_parser.add_argument("--all", action="store_true", help="Show every article")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "portfolio":
        return cmd_portfolio(args)
    elif args.command == "chart":
        return cmd_chart(args)
    elif args.command == "search":
        return cmd_search(args)
    elif args.command == "news":
        return cmd_news(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
