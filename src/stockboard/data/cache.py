"""Session-scoped memo of daily price series.

Entries never expire: a dashboard session does not live long enough for daily
closes to go meaningfully stale. Callers that need fresh data drop entries
with :meth:`SeriesCache.invalidate` or :meth:`SeriesCache.clear`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from stockboard.data.sources import PriceSource
from stockboard.types import PriceSeries

logger = logging.getLogger(__name__)


class SeriesCache:
    """Memoizes one :class:`PriceSeries` per symbol.

    Concurrent first requests for the same symbol share one in-flight fetch.
    The blocking source runs in a worker thread so a fan-out over several
    symbols fetches them concurrently. Failed fetches are not cached.

    :param source: Price source used on a cache miss.
    """

    def __init__(self, source: PriceSource) -> None:
        self.source = source
        self._series: dict[str, PriceSeries] = {}
        self._inflight: dict[str, asyncio.Task[PriceSeries]] = {}

    @staticmethod
    def _key(symbol: str) -> str:
        return symbol.strip().upper()

    def __len__(self) -> int:
        return len(self._series)

    def contains(self, symbol: str) -> bool:
        return self._key(symbol) in self._series

    def invalidate(self, symbol: str) -> None:
        """Drop the memoized series for ``symbol`` if present."""
        self._series.pop(self._key(symbol), None)

    def clear(self) -> None:
        self._series.clear()

    async def get_series(self, symbol: str) -> PriceSeries:
        """Return the daily series for ``symbol``, fetching it on first use.

        :param symbol: Ticker symbol (case-insensitive).
        :returns: The memoized PriceSeries.
        :raises FetchFailure: If the source fails; the next call retries.
        """
        key = self._key(symbol)
        cached = self._series.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        task = self._inflight.get(key)
        if task is None:
            logger.debug("Cache miss for %s", key)
            task = asyncio.ensure_future(self._fetch(key))
            self._inflight[key] = task
        else:
            logger.debug("Joining in-flight fetch for %s", key)

        # One cancelled waiter must not cancel the shared fetch
        return await asyncio.shield(task)

    async def get_many(self, symbols: Iterable[str]) -> list[PriceSeries]:
        """Fetch several symbols concurrently, preserving input order.

        :raises FetchFailure: If any single fetch fails.
        """
        return list(await asyncio.gather(*(self.get_series(s) for s in symbols)))

    async def _fetch(self, key: str) -> PriceSeries:
        try:
            series = await asyncio.to_thread(self.source.fetch_daily_series, key)
        finally:
            self._inflight.pop(key, None)
        self._series[key] = series
        return series


__all__ = ["SeriesCache"]
