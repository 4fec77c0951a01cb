"""Chart sessions: turn a request into chart data and apply only fresh results.

Each refresh takes a generation token. When a newer refresh starts before an
older one finishes, the older result is discarded instead of overwriting the
chart, so rapid window changes cannot leave a stale chart on screen.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from stockboard.config import BENCHMARK_SYMBOLS, REFERENCE_SYMBOL
from stockboard.engine.assemble import DatasetAssembler
from stockboard.engine.normalize import align_to_labels, slice_series
from stockboard.engine.window import DEFAULT_LOOKBACK, resolve_window
from stockboard.exceptions import (DegenerateSeries, FetchFailure,
                                   NoDataWindow, NoOverlap, StockboardError)
from stockboard.types import (ChartData, DateWindow, FrozenModel,
                              MutableModel, NormalizedDataset)

if TYPE_CHECKING:
    from stockboard.data.cache import SeriesCache
    from stockboard.portfolio import Portfolio

logger = logging.getLogger(__name__)

PRIMARY_COLOR = "rgba(191, 215, 255, 1)"
BENCHMARK_COLORS = {
    "SPY": "rgba(127, 180, 255, 1)",
    "DIA": "rgba(156, 219, 186, 1)",
    "QQQ": "rgba(241, 184, 255, 1)",
}


class ChartStatus(str, Enum):
    """Outcome of a chart refresh."""

    OK = "ok"
    EMPTY_PORTFOLIO = "empty_portfolio"
    NO_SYMBOL = "no_symbol"
    NO_DATA = "no_data"
    DEGENERATE = "degenerate"
    NO_OVERLAP = "no_overlap"
    FETCH_FAILED = "fetch_failed"
    STALE = "stale"


class ChartUpdate(FrozenModel):
    """Result of one refresh.

    :param status: Outcome.
    :param message: Status line for the user; empty when there is nothing to say.
    :param chart: Chart data produced by this refresh, if any.
    :param window: Window the refresh resolved, if it got that far.
    :param applied: Whether the chart was committed to the session.
    """

    status: ChartStatus
    message: str = ""
    chart: ChartData | None = None
    window: DateWindow | None = None
    applied: bool = False


class WindowInputs(MutableModel):
    """The two window boundary fields the user edits.

    Empty strings mean "use the default".
    """

    start: str = ""
    end: str = ""

    def apply(self, window: DateWindow) -> None:
        """Show the window that was actually used."""
        self.start = window.start
        self.end = window.end


class ChartSession:
    """Owns one chart: its window inputs, current data and generation counter.

    :param cache: Series cache shared across sessions.
    :param inputs: Window inputs (a blank pair if None).
    :param lookback: Default window length in trading days.
    """

    FAILURE_MESSAGE = "There was a problem loading data. Try again later."

    def __init__(
        self,
        cache: SeriesCache,
        inputs: WindowInputs | None = None,
        lookback: int = DEFAULT_LOOKBACK,
    ) -> None:
        self.cache = cache
        self.assembler = DatasetAssembler(cache)
        self.inputs = inputs or WindowInputs()
        self.lookback = lookback
        self.chart: ChartData | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        """Start a refresh and return its generation token."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def commit(self, token: int, chart: ChartData) -> bool:
        """Apply ``chart`` if ``token`` is still the latest generation.

        :returns: True if applied, False if the result was stale and dropped.
        """
        if not self.is_current(token):
            logger.info(
                "Discarding stale chart (generation %d, current %d)",
                token,
                self._generation,
            )
            return False
        self.chart = chart
        return True

    async def resolve(self, token: int) -> tuple[DateWindow, list[str]]:
        """Resolve the window against the reference calendar.

        Writes the resolved window back to the inputs while ``token`` is current.

        :returns: The window and the reference trading days inside it.
        :raises NoDataWindow: If the reference series is empty.
        """
        reference = await self.cache.get_series(REFERENCE_SYMBOL)
        window = resolve_window(
            self.inputs.start, self.inputs.end, reference.dates, self.lookback
        )
        if self.is_current(token):
            self.inputs.apply(window)
        labels = slice_series(reference, window).dates
        return window, labels

    async def benchmark_datasets(
        self,
        window: DateWindow,
        benchmarks: Iterable[str],
    ) -> list[NormalizedDataset]:
        """Build the enabled benchmarks in fixed display order."""
        enabled = {b.upper() for b in benchmarks}
        datasets = []
        for symbol in BENCHMARK_SYMBOLS:
            if symbol not in enabled:
                continue
            datasets.append(
                await self.assembler.build_dataset(
                    symbol, window, symbol, {"border_color": BENCHMARK_COLORS[symbol]}
                )
            )
        return datasets

    def finish(
        self,
        token: int,
        window: DateWindow,
        labels: list[str],
        datasets: list[NormalizedDataset],
        status: ChartStatus = ChartStatus.OK,
        message: str = "",
    ) -> ChartUpdate:
        """Align datasets to the labels and commit the chart if still current."""
        chart = ChartData(
            labels=labels,
            datasets=[align_to_labels(ds, labels) for ds in datasets],
        )
        if not self.commit(token, chart):
            return ChartUpdate(status=ChartStatus.STALE, chart=chart, window=window)
        return ChartUpdate(
            status=status, message=message, chart=chart, window=window, applied=True
        )

    def failure(self, token: int, error: StockboardError) -> ChartUpdate:
        """Map an engine or fetch error to a status; the current chart is kept."""
        if not self.is_current(token):
            return ChartUpdate(status=ChartStatus.STALE, message=str(error))

        logger.warning("Chart refresh failed: %s", error)
        if isinstance(error, NoDataWindow):
            return ChartUpdate(status=ChartStatus.NO_DATA, message="Not enough data yet.")
        if isinstance(error, NoOverlap):
            return ChartUpdate(
                status=ChartStatus.NO_OVERLAP,
                message="No date in this range has data for every ticker in your portfolio.",
            )
        if isinstance(error, DegenerateSeries):
            return ChartUpdate(
                status=ChartStatus.DEGENERATE,
                message="Not enough data in the selected range.",
            )
        return ChartUpdate(status=ChartStatus.FETCH_FAILED, message=self.FAILURE_MESSAGE)


class PortfolioChartSession(ChartSession):
    """Portfolio blend drawn against the selected benchmarks."""

    FAILURE_MESSAGE = (
        "There was a problem loading data (possibly hitting the free API limit). "
        "Try again later."
    )
    EMPTY_MESSAGE = "Add a few tickers to see portfolio performance alongside the indices."

    async def refresh(
        self,
        portfolio: Portfolio,
        benchmarks: Iterable[str] = BENCHMARK_SYMBOLS,
    ) -> ChartUpdate:
        """Rebuild the portfolio chart for the current window inputs.

        :param portfolio: Tracked tickers (read only).
        :param benchmarks: Benchmarks to draw.
        :returns: The outcome; on failure the previous chart stays in place.
        """
        token = self.begin()
        try:
            window, labels = await self.resolve(token)

            datasets: list[NormalizedDataset] = []
            portfolio_ds = await self.assembler.build_portfolio_dataset(
                portfolio.symbols, window, {"border_color": PRIMARY_COLOR}
            )
            if portfolio_ds is not None:
                datasets.append(portfolio_ds)

            datasets.extend(await self.benchmark_datasets(window, benchmarks))
        except (FetchFailure, NoDataWindow, DegenerateSeries, NoOverlap) as e:
            return self.failure(token, e)

        if not portfolio.symbols:
            return self.finish(
                token, window, labels, datasets,
                ChartStatus.EMPTY_PORTFOLIO, self.EMPTY_MESSAGE,
            )
        return self.finish(token, window, labels, datasets)


class SearchChartSession(ChartSession):
    """A single searched ticker drawn against the selected benchmarks."""

    FAILURE_MESSAGE = "There was a problem loading performance data for this ticker."

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.symbol: str | None = None

    async def refresh(
        self,
        symbol: str | None = None,
        benchmarks: Iterable[str] = BENCHMARK_SYMBOLS,
    ) -> ChartUpdate:
        """Rebuild the chart of the searched ticker.

        :param symbol: Newly searched ticker; None keeps the previous one.
        :param benchmarks: Benchmarks to draw.
        """
        if symbol is not None:
            self.symbol = symbol.strip().upper()
        if not self.symbol:
            return ChartUpdate(
                status=ChartStatus.NO_SYMBOL,
                message="Search for a ticker to see its performance.",
            )

        token = self.begin()
        try:
            window, labels = await self.resolve(token)
            datasets = [
                await self.assembler.build_dataset(
                    self.symbol, window, self.symbol, {"border_color": PRIMARY_COLOR}
                )
            ]
            datasets.extend(await self.benchmark_datasets(window, benchmarks))
        except (FetchFailure, NoDataWindow, DegenerateSeries, NoOverlap) as e:
            return self.failure(token, e)

        return self.finish(token, window, labels, datasets)


__all__ = [
    "ChartStatus",
    "ChartUpdate",
    "WindowInputs",
    "ChartSession",
    "PortfolioChartSession",
    "SearchChartSession",
]
