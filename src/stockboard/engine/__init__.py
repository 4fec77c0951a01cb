"""Time-series alignment and normalization engine."""

from stockboard.engine.assemble import DatasetAssembler
from stockboard.engine.blend import blend
from stockboard.engine.normalize import align_to_labels, normalize, slice_series
from stockboard.engine.window import DEFAULT_LOOKBACK, resolve_window

__all__ = [
    "DEFAULT_LOOKBACK",
    "resolve_window",
    "slice_series",
    "normalize",
    "align_to_labels",
    "blend",
    "DatasetAssembler",
]
