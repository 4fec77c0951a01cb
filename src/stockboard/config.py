"""Configuration loading for the dashboard.

Example config file (stockboard.yaml):

    data_source: "alphavantage"
    api_key: "YOUR_KEY"          # or set ALPHAVANTAGE_API_KEY
    portfolio_path: "~/.stockboard/portfolio.json"
    benchmarks:
      - "SPY"
      - "QQQ"
    lookback_days: 90
    logging:
      level: "INFO"
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from stockboard.exceptions import ConfigError
from stockboard.types import AppConfig, Symbol

# Broad-market benchmark whose trading days act as the chart calendar
REFERENCE_SYMBOL = Symbol("SPY")

# Benchmarks offered next to the portfolio, in display order
BENCHMARK_SYMBOLS = (Symbol("SPY"), Symbol("DIA"), Symbol("QQQ"))

# Valid price source types
VALID_DATA_SOURCES = frozenset(["alphavantage", "yahoo", "csv"])

VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

API_KEY_ENV = "ALPHAVANTAGE_API_KEY"


def parse_benchmarks(raw: Any) -> list[Symbol]:
    """Validate a benchmark list and return it in canonical display order.

    :param raw: List of benchmark symbols (case-insensitive).
    :returns: Requested benchmarks ordered as in ``BENCHMARK_SYMBOLS``.
    :raises ConfigError: If the value is not a list or names an unknown benchmark.
    """
    if not isinstance(raw, list):
        raise ConfigError("'benchmarks' must be a list")

    requested = {str(s).strip().upper() for s in raw}
    unknown = requested - set(BENCHMARK_SYMBOLS)
    if unknown:
        raise ConfigError(
            f"Unknown benchmark(s) {sorted(unknown)}. "
            f"Valid options: {list(BENCHMARK_SYMBOLS)}"
        )
    return [s for s in BENCHMARK_SYMBOLS if s in requested]


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Parse and validate a configuration file.

    Without a path the defaults are used. The ``ALPHAVANTAGE_API_KEY``
    environment variable overrides any ``api_key`` in the file.

    :param config_path: Path to YAML configuration file, or None.
    :returns: Validated AppConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    raw_config: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file not found: {config_path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError("Configuration must be a YAML mapping")
        raw_config = loaded

    kwargs: dict[str, Any] = {}

    # Parse data_source
    if "data_source" in raw_config:
        data_source = str(raw_config["data_source"]).lower()
        if data_source not in VALID_DATA_SOURCES:
            raise ConfigError(
                f"Invalid data_source '{raw_config['data_source']}'. "
                f"Valid options: {sorted(VALID_DATA_SOURCES)}"
            )
        kwargs["data_source"] = data_source

    # Parse source_params (optional)
    source_params = raw_config.get("source_params", {})
    if not isinstance(source_params, dict):
        raise ConfigError("'source_params' must be a mapping")
    kwargs["source_params"] = source_params

    if "portfolio_path" in raw_config:
        kwargs["portfolio_path"] = str(raw_config["portfolio_path"])

    if "benchmarks" in raw_config:
        kwargs["benchmarks"] = parse_benchmarks(raw_config["benchmarks"])

    if "lookback_days" in raw_config:
        lookback = raw_config["lookback_days"]
        if not isinstance(lookback, int) or isinstance(lookback, bool) or lookback <= 0:
            raise ConfigError("'lookback_days' must be a positive integer")
        kwargs["lookback_days"] = lookback

    # Parse logging (optional)
    raw_logging = raw_config.get("logging", {})
    if not isinstance(raw_logging, dict):
        raise ConfigError("'logging' must be a mapping")
    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. Valid options: {sorted(VALID_LOG_LEVELS)}"
        )
    kwargs["log_level"] = log_level

    api_key = os.environ.get(API_KEY_ENV) or raw_config.get("api_key", "")
    if not isinstance(api_key, str):
        raise ConfigError("'api_key' must be a string")
    kwargs["api_key"] = api_key

    return AppConfig(**kwargs)


__all__ = [
    "REFERENCE_SYMBOL",
    "BENCHMARK_SYMBOLS",
    "VALID_DATA_SOURCES",
    "API_KEY_ENV",
    "parse_benchmarks",
    "load_config",
]
