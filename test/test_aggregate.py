"""
Tests for pointwise aggregation of cumulative series.
"""

import unittest
import sys
import os

import numpy as np

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from algorithms.aggregate import aggregate, _contribution
from algorithms.grid_series import GridSeries
from algorithms.resample import resample
from common.errors import GridAlignmentError


class TestAggregate(unittest.TestCase):
    """Test union grids and per-series contributions."""

    def test_empty_list(self):
        result = aggregate([], 1000)
        self.assertEqual(len(result), 0)

    def test_single_series_equals_resampling(self):
        series = [(37, 0), (180, 1500), (640, 2400), (1999, 90000)]
        self.assertEqual(aggregate([series], 100), resample(series, 100))

    def test_late_starting_stream_contributes_zero(self):
        """Second stream starts half way: 0 before it starts, then summed."""
        early = [(0, 0), (1_000_000, 500_000)]
        late = [(500_000, 0), (1_000_000, 500_000)]
        result = aggregate([early, late], 500_000)
        self.assertEqual(list(result), [(0, 0.0), (500_000, 250_000.0), (1_000_000, 1_000_000.0)])

    def test_disjoint_series(self):
        """Each region takes the active series plus the other's boundary value."""
        first = [(0, 0), (1000, 100)]
        second = [(3000, 0), (4000, 50)]
        result = aggregate([first, second], 1000)
        self.assertEqual(
            list(result),
            [(0, 0.0), (1000, 100.0), (2000, 100.0), (3000, 100.0), (4000, 150.0)],
        )

    def test_union_range(self):
        result = aggregate([[(2000, 1)], [(0, 1), (500, 2)]], 1000)
        self.assertEqual(result.start, 0)
        self.assertEqual(result.end, 2000)

    def test_finished_stream_holds_total(self):
        short = [(0, 0), (1000, 10)]
        long = [(0, 0), (3000, 30)]
        result = dict(aggregate([short, long], 1000))
        self.assertEqual(result[3000], 40.0)

    def test_grid_series_input_used_as_is(self):
        grid = GridSeries([(1000, 5.0), (2000, 7.0)], 1000)
        self.assertEqual(aggregate([grid], 1000), grid)

    def test_grid_series_with_other_interval_is_resampled(self):
        grid = GridSeries([(0, 0.0), (500, 5.0), (1000, 10.0)], 500)
        self.assertEqual(list(aggregate([grid], 1000)), [(0, 0.0), (1000, 10.0)])

    def test_empty_series_are_ignored(self):
        series = [(0, 0), (1000, 10)]
        self.assertEqual(aggregate([[], series, []], 1000), resample(series, 1000))
        self.assertEqual(len(aggregate([[], []], 1000)), 0)

    def test_query_between_points_is_fatal(self):
        grid = GridSeries([(0, 0.0), (1000, 10.0)], 1000)
        with self.assertRaises(GridAlignmentError):
            _contribution(grid, np.array([500], dtype=np.int64))

    def test_contribution_edges(self):
        grid = GridSeries([(1000, 3.0), (2000, 4.0)], 1000)
        values = _contribution(grid, np.array([0, 1000, 2000, 3000], dtype=np.int64))
        self.assertEqual(values.tolist(), [0.0, 3.0, 4.0, 4.0])


if __name__ == '__main__':
    unittest.main()
