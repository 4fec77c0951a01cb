"""Price data sources and the session series cache."""

from stockboard.data.cache import SeriesCache
from stockboard.data.sources import (AlphaVantageSource, CSVPriceSource,
                                     PriceSource, YahooPriceSource,
                                     resolve_price_source)

__all__ = [
    "PriceSource",
    "AlphaVantageSource",
    "YahooPriceSource",
    "CSVPriceSource",
    "resolve_price_source",
    "SeriesCache",
]
