"""Equal-weight blending of several price series into one indexed series.

The blended calendar is the first constituent's dates inside the window. This
is a simplification rather than an intersection of all calendars: a date that
the other constituents share but the first one lacks never appears.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from stockboard.engine.normalize import INDEX_BASE, slice_series
from stockboard.exceptions import DegenerateSeries
from stockboard.types import DateWindow, IndexedPoint, PriceSeries

logger = logging.getLogger(__name__)


def blend(
    series_list: Sequence[PriceSeries],
    window: DateWindow,
) -> list[IndexedPoint] | None:
    """Blend constituents into the indexed return of an equal-weight basket.

    A date is kept only when every constituent has a close for it. Each
    constituent's return is measured against its own close on the first kept
    date; the returns are averaged arithmetically and scaled to 100.

    :param series_list: Raw constituent series, first one drives the calendar.
    :param window: Window to slice every constituent to.
    :returns: Indexed points, or None when the list is empty, the first
        constituent has no data in the window or no date is shared by all.
    :raises DegenerateSeries: If a constituent's close on the first kept
        date is zero.
    """
    if not series_list:
        return None

    sliced = [slice_series(series, window) for series in series_list]
    dates = sliced[0].dates
    if not dates:
        return None

    lookups = [s.close_by_date() for s in sliced]

    kept_dates: list[str] = []
    rows: list[list[float]] = []
    for date in dates:
        closes = [lookup.get(date) for lookup in lookups]
        if any(close is None for close in closes):
            continue
        kept_dates.append(date)
        rows.append(closes)  # type: ignore[arg-type]

    if not kept_dates:
        logger.info(
            "No date in %s..%s is shared by all %d constituents",
            window.start,
            window.end,
            len(series_list),
        )
        return None

    dropped = len(dates) - len(kept_dates)
    if dropped:
        logger.debug("Dropped %d dates missing from at least one constituent", dropped)

    prices = np.asarray(rows, dtype=float)
    base = prices[0]
    if np.any(base == 0):
        zero = [sliced[i].symbol for i in np.flatnonzero(base == 0)]
        raise DegenerateSeries(
            f"Zero close on {kept_dates[0]} for {', '.join(zero)}, cannot rebase"
        )

    values = (prices / base).mean(axis=1) * INDEX_BASE
    return [
        IndexedPoint(date=date, value=float(value))
        for date, value in zip(kept_dates, values)
    ]


__all__ = ["blend"]
