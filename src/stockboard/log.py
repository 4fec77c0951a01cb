"""Logging setup shared by the command line entry point.

Library modules only create module loggers with ``logging.getLogger(__name__)``;
handlers and levels are configured once here.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)-28s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("yfinance", "urllib3", "requests", "peewee")


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> None:
    """Configure root logging to stdout and optionally a file.

    :param level: Logging level, as an int or a level name such as ``"DEBUG"``.
    :param log_file: Optional path of a log file (overwritten on each run).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8", mode="w"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
