"""Dashboard exception hierarchy.

All package-specific exceptions derive from :class:`StockboardError` so callers
can catch all dashboard errors uniformly. Each class carries an
:class:`ErrorKind` so calling layers can decide retry and display behavior
without parsing messages; the human-readable text is kept as ``detail``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced to callers."""

    CONFIG = "config"
    FETCH_FAILURE = "fetch_failure"
    NO_DATA_WINDOW = "no_data_window"
    DEGENERATE_SERIES = "degenerate_series"
    NO_OVERLAP = "no_overlap"


class StockboardError(Exception):
    """Base class for dashboard exceptions.

    Derived exceptions should extend this class so that callers can catch all
    package-specific errors uniformly.

    :param detail: Optional human-readable diagnostic.
    """

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.kind.value)
        self.detail = detail


class ConfigError(StockboardError):
    """Raised when configuration files or parameters are invalid."""

    kind = ErrorKind.CONFIG


class InvalidDate(ConfigError):
    """Raised when a requested window bound is not a ``YYYY-MM-DD`` string."""


class InvalidTicker(ConfigError):
    """Raised when a ticker symbol does not look like a simple ticker."""


class DataSourceError(StockboardError):
    """Raised when accessing or processing a data source fails."""

    kind = ErrorKind.FETCH_FAILURE


class FetchFailure(DataSourceError):
    """Raised when the price or news provider cannot deliver usable data.

    Never cached; the next request for the same symbol retries.

    :param detail: Human-readable diagnostic.
    :param symbol: Symbol being fetched, if any.
    :param reason: ``"http"``, ``"api"`` (provider-reported error such as a
        rate limit) or ``"parse"`` (unrecognized response shape).
    """

    def __init__(
        self,
        detail: str | None = None,
        symbol: str | None = None,
        reason: str = "http",
    ) -> None:
        super().__init__(detail)
        self.symbol = symbol
        self.reason = reason


class EngineError(StockboardError):
    """Base for failures of the alignment and normalization engine."""


class NoDataWindow(EngineError):
    """Raised when the reference calendar is empty and no window can be resolved."""

    kind = ErrorKind.NO_DATA_WINDOW


class DegenerateSeries(EngineError):
    """Raised when a series cannot be rebased (empty window or zero base close)."""

    kind = ErrorKind.DEGENERATE_SERIES


class NoOverlap(EngineError):
    """Raised when a portfolio blend finds no date every constituent shares."""

    kind = ErrorKind.NO_OVERLAP


__all__ = [
    "ErrorKind",
    "StockboardError",
    "ConfigError",
    "InvalidDate",
    "InvalidTicker",
    "DataSourceError",
    "FetchFailure",
    "EngineError",
    "NoDataWindow",
    "DegenerateSeries",
    "NoOverlap",
]
