"""Window slicing and rebasing of price series to a 100-point index."""

from __future__ import annotations

from typing import Sequence

from stockboard.exceptions import DegenerateSeries
from stockboard.types import (DateWindow, IndexedPoint, NormalizedDataset,
                              PriceSeries)

# Index level of the first point inside the window
INDEX_BASE = 100.0


def slice_series(series: PriceSeries, window: DateWindow) -> PriceSeries:
    """Keep the points whose date lies inside ``window`` (inclusive).

    :param series: Series to slice.
    :param window: Window to restrict to.
    :returns: New series with the same symbol, original order preserved.
    """
    points = tuple(p for p in series.points if window.contains(p.date))
    return PriceSeries(symbol=series.symbol, points=points)


def normalize(series: PriceSeries) -> list[IndexedPoint]:
    """Rebase a series so its first point equals 100.

    Pass the series already sliced to the window so the base is the first
    in-window close.

    :param series: Series to rebase.
    :returns: Indexed points, empty for an empty series.
    :raises DegenerateSeries: If the first close is zero.
    """
    if not series.points:
        return []

    base = series.points[0].close
    if base == 0:
        raise DegenerateSeries(
            f"{series.symbol}: close on {series.points[0].date} is zero, cannot rebase"
        )

    return [
        IndexedPoint(date=p.date, value=p.close / base * INDEX_BASE)
        for p in series.points
    ]


def align_to_labels(dataset: NormalizedDataset, labels: Sequence[str]) -> NormalizedDataset:
    """Project a dataset onto a label sequence.

    Every label gets the dataset's value for that date, or None when the
    dataset has no point there. Dataset dates missing from the labels are
    dropped.

    :param dataset: Dataset with values positional to its own dates.
    :param labels: Target date labels.
    :returns: New dataset whose dates equal ``labels``.
    """
    by_date = dict(zip(dataset.dates, dataset.values))
    return dataset.model_copy(
        update={
            "dates": list(labels),
            "values": [by_date.get(label) for label in labels],
        }
    )


__all__ = ["INDEX_BASE", "slice_series", "normalize", "align_to_labels"]
