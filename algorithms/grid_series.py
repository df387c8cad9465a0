"""
Grid-aligned series type shared by the resampler and the aggregator.
"""

from collections.abc import Sequence
from typing import Iterable, List, Tuple

import numpy as np

from common.errors import GridAlignmentError

Sample = Tuple[int, float]
Series = List[Sample]


def check_interval(interval: int) -> int:
    """Validate a grid step in microseconds."""
    if int(interval) != interval or interval <= 0:
        raise ValueError(f"Grid interval must be a positive integer of microseconds, got {interval!r}")
    return int(interval)


class GridSeries(Sequence):
    """Series whose timestamps are consecutive multiples of ``interval``.

    Behaves as a read-only sequence of ``(timestamp_us, value)`` tuples.
    The alignment is checked on construction, so code holding a
    ``GridSeries`` can rely on every query point landing exactly on, before
    or after it.
    """

    __slots__ = ('interval', '_times', '_values')

    def __init__(self, samples: Iterable[Sample], interval: int):
        self.interval = check_interval(interval)
        pairs = list(samples)
        self._times = np.array([int(t) for t, _ in pairs], dtype=np.int64)
        self._values = np.array([float(v) for _, v in pairs], dtype=float)
        self._times.setflags(write=False)
        self._values.setflags(write=False)
        self._validate()

    @classmethod
    def from_arrays(cls, times: np.ndarray, values: np.ndarray, interval: int) -> "GridSeries":
        return cls(zip(times.tolist(), values.tolist()), interval)

    def _validate(self):
        if len(self._times) == 0:
            return
        off_grid = self._times % self.interval != 0
        if off_grid.any():
            raise GridAlignmentError(
                f"Timestamp {self._times[off_grid][0]} is not a multiple of interval {self.interval}"
            )
        gaps = np.diff(self._times)
        if (gaps != self.interval).any():
            raise GridAlignmentError(
                f"Grid series must advance by exactly {self.interval} us per sample"
            )

    @property
    def timestamps(self) -> np.ndarray:
        return self._times

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def start(self) -> int:
        return int(self._times[0])

    @property
    def end(self) -> int:
        return int(self._times[-1])

    def __len__(self) -> int:
        return len(self._times)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        return (int(self._times[index]), float(self._values[index]))

    def __iter__(self):
        return zip(self._times.tolist(), self._values.tolist())

    def __eq__(self, other):
        if isinstance(other, GridSeries):
            return (
                self.interval == other.interval
                and np.array_equal(self._times, other._times)
                and np.array_equal(self._values, other._values)
            )
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        if not len(self):
            return f"GridSeries(interval={self.interval}, empty)"
        return f"GridSeries(interval={self.interval}, {len(self)} samples, {self.start}..{self.end})"
