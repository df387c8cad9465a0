"""
Tests for the command line interface.
"""

import unittest
import tempfile
import os
import sys

import matplotlib
matplotlib.use('Agg')
import pandas as pd

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cli import ThroughputPlotCLI
from persistence.parquet import RunParquetStore
from factories import both_phase_run, group, make_run


class TestThroughputPlotCLI(unittest.TestCase):
    """Test command dispatch and exit codes."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.run_dir = os.path.join(self.tmp.name, 'run')
        self.plots_dir = os.path.join(self.tmp.name, 'plots')
        self.cli = ThroughputPlotCLI()

    def tearDown(self):
        self.tmp.cleanup()

    def test_no_command_prints_help(self):
        self.assertEqual(self.cli.run([]), 1)

    def test_plot_missing_run_dir(self):
        code = self.cli.run(['plot', '--run-dir', os.path.join(self.tmp.name, 'missing')])
        self.assertEqual(code, 1)

    def test_plot(self):
        RunParquetStore(self.run_dir).save(both_phase_run())
        code = self.cli.run([
            'plot', '--run-dir', self.run_dir, '--output-dir', self.plots_dir,
            '--split-throughput', '--transferred', '--title', 'CLI test',
        ])
        self.assertEqual(code, 0)
        files = os.listdir(self.plots_dir)
        self.assertEqual(len(files), 1)
        self.assertTrue(files[0].endswith('.png'))

    def test_export(self):
        RunParquetStore(self.run_dir).save(both_phase_run())
        output = os.path.join(self.tmp.name, 'series.parquet')
        code = self.cli.run(['export', '--run-dir', self.run_dir, '--output', output])
        self.assertEqual(code, 0)
        self.assertIn('both_total', set(pd.read_parquet(output)['series']))

    def test_inconsistent_run_fails(self):
        # Combined phase recorded without its upload streams
        run = make_run(group(True, True, [(0, 0), (1_000_000, 1_000)]))
        RunParquetStore(self.run_dir).save(run)
        output = os.path.join(self.tmp.name, 'series.parquet')
        self.assertEqual(self.cli.run(['export', '--run-dir', self.run_dir, '--output', output]), 1)
        self.assertFalse(os.path.exists(output))
        self.assertEqual(self.cli.run(['plot', '--run-dir', self.run_dir, '--output-dir', self.plots_dir]), 1)


if __name__ == '__main__':
    unittest.main()
