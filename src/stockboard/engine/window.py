"""Date window resolution against a reference trading-day calendar."""

from __future__ import annotations

from typing import Sequence

from stockboard.exceptions import InvalidDate, NoDataWindow
from stockboard.types import DateWindow, is_calendar_day

# Default window length, counted in trading days (entries of the calendar)
DEFAULT_LOOKBACK = 90


def _requested(value: str | None) -> str | None:
    """Treat None and blank strings as absent; validate anything else."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not is_calendar_day(value):
        raise InvalidDate(f"Expected a YYYY-MM-DD date, got {value!r}")
    return value


def resolve_window(
    requested_start: str | None,
    requested_end: str | None,
    available_dates: Sequence[str],
    lookback: int = DEFAULT_LOOKBACK,
) -> DateWindow:
    """Derive a valid window from user input and the available calendar.

    A missing end defaults to the last available date. A missing start
    defaults to ``lookback`` trading days before the last available date,
    clamped to the first one. Bounds outside the calendar are clamped and
    reversed bounds are swapped. The result always lies within the calendar,
    so resolving it again yields the same window.

    :param requested_start: Requested first day, or None/"" for the default.
    :param requested_end: Requested last day, or None/"" for the default.
    :param available_dates: Trading days of the reference series, any order.
    :param lookback: Default window length in trading days.
    :returns: The resolved window.
    :raises NoDataWindow: If ``available_dates`` is empty.
    :raises InvalidDate: If a requested bound is not ``YYYY-MM-DD``.
    """
    if not available_dates:
        raise NoDataWindow("No trading days available to derive a window from")

    # Fixed-width YYYY-MM-DD strings sort chronologically
    sorted_dates = sorted(available_dates)
    min_date = sorted_dates[0]
    max_date = sorted_dates[-1]

    start = _requested(requested_start)
    end = _requested(requested_end)

    if end is None:
        end = max_date
    if start is None:
        start = sorted_dates[max(len(sorted_dates) - 1 - lookback, 0)]

    if start < min_date:
        start = min_date
    if end > max_date:
        end = max_date
    # A start past the data or an end before it would survive the swap below
    start = min(start, max_date)
    end = max(end, min_date)

    if start > end:
        start, end = end, start

    return DateWindow(start=start, end=end)


__all__ = ["DEFAULT_LOOKBACK", "resolve_window"]
