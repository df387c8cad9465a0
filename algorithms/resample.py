"""
Resampling of sparse cumulative counters onto a uniform time grid.
"""

import logging
from typing import Sequence

import numpy as np

from .grid_series import GridSeries, Sample, check_interval

logger = logging.getLogger(__name__)


def to_float(stream: Sequence[Sample]) -> list:
    """Widen raw ``(timestamp_us, byte_count)`` samples to float values."""
    return [(int(t), float(v)) for t, v in stream]


def resample(series: Sequence[Sample], interval: int) -> GridSeries:
    """
    Map a time-ascending cumulative series onto the grid of ``interval``.

    The grid runs from ``floor(first / interval) * interval`` to
    ``ceil(last / interval) * interval``. A grid point takes the value of
    the first sample at or after it when that sample sits exactly on the
    point or is the first sample; points past the last sample keep the
    final value; everything else is linearly interpolated between the two
    neighbouring samples.

    Args:
        series: Sequence of ``(timestamp_us, value)`` pairs, timestamps non-decreasing
        interval: Grid step in microseconds

    Returns:
        GridSeries aligned to ``interval`` (empty for empty input)
    """
    interval = check_interval(interval)
    if len(series) == 0:
        return GridSeries((), interval)

    times = np.array([int(t) for t, _ in series], dtype=np.int64)
    values = np.array([float(v) for _, v in series], dtype=float)

    start = times[0] // interval * interval
    end = -(-times[-1] // interval) * interval
    grid = np.arange(start, end + 1, interval, dtype=np.int64)

    # First input sample at or after each grid point
    index = np.searchsorted(times, grid, side='left')
    clipped = np.minimum(index, len(times) - 1)

    # Exact hits, points before the first sample and points past the last one
    result = values[clipped].copy()

    between = (index > 0) & (index < len(times)) & (times[clipped] != grid)
    if between.any():
        upper = index[between]
        lower = upper - 1
        span = times[upper] - times[lower]
        # Duplicate timestamps take the later value
        safe_span = np.where(span == 0, 1, span)
        ratio = (grid[between] - times[lower]) / safe_span
        interpolated = values[lower] + (values[upper] - values[lower]) * ratio
        result[between] = np.where(span == 0, values[upper], interpolated)

    logger.debug(f"Resampled {len(series)} samples onto {len(grid)} grid points ({interval} us)")
    return GridSeries.from_arrays(grid, result, interval)
