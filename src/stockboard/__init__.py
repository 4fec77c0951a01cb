"""Portfolio vs. benchmark dashboard package root."""

from stockboard.exceptions import ErrorKind, StockboardError

__all__ = ["ErrorKind", "StockboardError"]
