"""
Pointwise aggregation of cumulative series onto a shared grid.
"""

import logging
from typing import Sequence, Union

import numpy as np

from common.errors import GridAlignmentError
from .grid_series import GridSeries, Sample, check_interval
from .resample import resample

logger = logging.getLogger(__name__)

SeriesLike = Union[GridSeries, Sequence[Sample]]


def _align(series: SeriesLike, interval: int) -> GridSeries:
    if isinstance(series, GridSeries) and series.interval == interval:
        return series
    return resample(series, interval)


def _contribution(series: GridSeries, grid: np.ndarray) -> np.ndarray:
    """Values of ``series`` at each point of ``grid``.

    Before its first point a series contributes 0 (nothing transferred yet),
    after its last point it holds its final total.
    """
    times = series.timestamps
    values = series.values

    index = np.searchsorted(times, grid, side='left')
    clipped = np.minimum(index, len(times) - 1)
    hit = (index < len(times)) & (times[clipped] == grid)
    before = (index == 0) & ~hit
    after = index == len(times)

    stray = ~(hit | before | after)
    if stray.any():
        raise GridAlignmentError(
            f"Grid point {int(grid[stray][0])} falls between two samples of a series "
            f"aligned to {series.interval} us"
        )

    return np.where(hit, values[clipped], np.where(after, values[-1], 0.0))


def aggregate(series_list: Sequence[SeriesLike], interval: int) -> GridSeries:
    """
    Sum several cumulative series on the union of their grids.

    Each input is resampled to ``interval`` independently, so inputs may
    start at different times and use different native cadences.

    Args:
        series_list: Raw series or GridSeries to combine
        interval: Grid step in microseconds

    Returns:
        GridSeries spanning from the earliest to the latest grid point of any input

    Raises:
        GridAlignmentError: a query point landed between two points of a
            resampled series (never happens for correctly aligned input)
    """
    interval = check_interval(interval)
    aligned = [_align(series, interval) for series in series_list]
    aligned = [series for series in aligned if len(series) > 0]

    if not aligned:
        return GridSeries((), interval)

    start = min(series.start for series in aligned)
    end = max(series.end for series in aligned)
    grid = np.arange(start, end + 1, interval, dtype=np.int64)

    total = np.zeros(len(grid), dtype=float)
    for series in aligned:
        total += _contribution(series, grid)

    logger.debug(f"Aggregated {len(aligned)} series onto {len(grid)} grid points")
    return GridSeries.from_arrays(grid, total, interval)
