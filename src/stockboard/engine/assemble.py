"""Render-ready dataset assembly on top of the series cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from stockboard.engine.blend import blend
from stockboard.engine.normalize import normalize, slice_series
from stockboard.exceptions import DegenerateSeries, NoOverlap
from stockboard.types import DateWindow, NormalizedDataset

if TYPE_CHECKING:
    from stockboard.data.cache import SeriesCache

PORTFOLIO_LABEL = "Portfolio"

# Presentation hints passed through to the renderer untouched
LINE_STYLE: dict[str, Any] = {
    "background_color": "transparent",
    "border_width": 2,
    "point_radius": 0,
    "tension": 0.25,
}
PORTFOLIO_LINE_STYLE: dict[str, Any] = {**LINE_STYLE, "border_width": 2.4}


class DatasetAssembler:
    """Builds indexed datasets for symbols and portfolios.

    Both builders depend only on their arguments and the cache contents; they
    never modify the portfolio or the window.

    :param cache: Series cache shared by the session.
    """

    def __init__(self, cache: SeriesCache) -> None:
        self.cache = cache

    async def build_dataset(
        self,
        symbol: str,
        window: DateWindow,
        label: str | None = None,
        style: dict[str, Any] | None = None,
    ) -> NormalizedDataset:
        """Build the indexed dataset of a single symbol.

        :param symbol: Symbol to chart.
        :param window: Resolved window.
        :param label: Legend label (defaults to the upper-cased symbol).
        :param style: Extra presentation hints merged over the defaults.
        :raises FetchFailure: If the symbol cannot be fetched.
        :raises DegenerateSeries: If the symbol has no data in the window or
            its first in-window close is zero.
        """
        raw = await self.cache.get_series(symbol)
        sliced = slice_series(raw, window)
        if not sliced.points:
            raise DegenerateSeries(
                f"{symbol.upper()} has no data between {window.start} and {window.end}"
            )

        points = normalize(sliced)
        return NormalizedDataset(
            label=label or symbol.upper(),
            dates=[p.date for p in points],
            values=[p.value for p in points],
            style={**LINE_STYLE, **(style or {})},
        )

    async def build_portfolio_dataset(
        self,
        symbols: Iterable[str],
        window: DateWindow,
        style: dict[str, Any] | None = None,
    ) -> NormalizedDataset | None:
        """Build the blended dataset of a portfolio.

        Constituents are fetched concurrently; one failed fetch fails the
        whole build.

        :param symbols: Portfolio symbols, first one drives the calendar.
        :param window: Resolved window.
        :param style: Extra presentation hints merged over the defaults.
        :returns: The blended dataset, or None for an empty portfolio.
        :raises FetchFailure: If any constituent cannot be fetched.
        :raises NoOverlap: If no date in the window is shared by all constituents.
        """
        symbols = list(symbols)
        if not symbols:
            return None

        series_list = await self.cache.get_many(symbols)
        points = blend(series_list, window)
        if points is None:
            raise NoOverlap(
                f"No date between {window.start} and {window.end} "
                f"has data for all of {', '.join(symbols)}"
            )

        return NormalizedDataset(
            label=PORTFOLIO_LABEL,
            dates=[p.date for p in points],
            values=[p.value for p in points],
            style={**PORTFOLIO_LINE_STYLE, **(style or {})},
        )


__all__ = ["PORTFOLIO_LABEL", "LINE_STYLE", "PORTFOLIO_LINE_STYLE", "DatasetAssembler"]
