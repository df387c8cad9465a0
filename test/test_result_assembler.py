"""
Tests for grouping raw streams into derived series.
"""

import unittest
import sys
import os

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from algorithms.aggregate import aggregate
from algorithms.resample import resample
from algorithms.result_assembler import ResultAssembler, assemble
from common.categories import StreamCategory
from common.errors import DuplicateCategoryError, MissingCategoryError
from persistence.record import Latency
from factories import INTERVAL_US, both_phase_run, group, make_run


class TestSingleDirection(unittest.TestCase):
    """Runs with a single download-only group."""

    def setUp(self):
        self.run = make_run(group(True, False, [(0, 0), (1_000_000, 1_000_000)]))
        self.result = assemble(self.run)

    def test_combined_download(self):
        self.assertEqual(
            list(self.result.combined_download),
            [(0, 0.0), (500_000, 500_000.0), (1_000_000, 1_000_000.0)],
        )

    def test_absent_categories(self):
        self.assertIsNotNone(self.result.download_bytes)
        self.assertIsNone(self.result.upload_bytes)
        self.assertIsNone(self.result.both_download_bytes)
        self.assertIsNone(self.result.both_upload_bytes)
        self.assertEqual(len(self.result.combined_upload), 0)

    def test_no_both_total(self):
        self.assertFalse(self.result.has_both_total)
        with self.assertRaises(MissingCategoryError):
            self.result.both_total

    def test_throughput_lines(self):
        lines = self.result.throughput_lines()
        self.assertEqual([line.name for line in lines], ['Download'])
        self.assertEqual(
            lines[0].rates,
            [(0, 0.0), (500_000, 8.0), (1_000_000, 8.0), (1_000_001, 0.0)],
        )

    def test_pass_through(self):
        self.assertIs(self.result.pings, self.run.pings)
        self.assertIsNone(self.result.peer_pings)
        self.assertEqual(self.result.start_us, self.run.start_us)
        self.assertEqual(self.result.duration_us, self.run.duration_us)

    def test_category_lookup_is_read_only(self):
        with self.assertRaises(TypeError):
            self.result.category_bytes[StreamCategory.UPLOAD_ONLY] = self.result.combined_download


class TestCategoryMerging(unittest.TestCase):
    """Per-category and cross-category combination."""

    def test_late_stream_in_same_group(self):
        run = make_run(group(True, False,
                             [(0, 0), (1_000_000, 500_000)],
                             [(500_000, 0), (1_000_000, 500_000)]))
        result = assemble(run)
        self.assertEqual(
            list(result.download_bytes),
            [(0, 0.0), (500_000, 250_000.0), (1_000_000, 1_000_000.0)],
        )

    def test_combined_series_of_full_run(self):
        run = both_phase_run()
        result = assemble(run)

        download = result.bytes_for(StreamCategory.DOWNLOAD_ONLY)
        both_download = result.bytes_for(StreamCategory.BOTH_DOWNLOAD)
        upload = result.bytes_for(StreamCategory.UPLOAD_ONLY)
        both_upload = result.bytes_for(StreamCategory.BOTH_UPLOAD)

        self.assertEqual(result.combined_download, aggregate([download, both_download], INTERVAL_US))
        self.assertEqual(result.combined_upload, aggregate([upload, both_upload], INTERVAL_US))
        self.assertEqual(result.both_total, aggregate([both_download, both_upload], INTERVAL_US))

    def test_both_total_values(self):
        result = assemble(both_phase_run())
        totals = dict(result.both_total)
        # 900,000 down plus 300,000 up once both streams finished
        self.assertEqual(totals[2_000_000], 1_200_000.0)
        self.assertEqual(totals[1_000_000], 0.0)

    def test_upload_group_merges_streams(self):
        result = assemble(both_phase_run())
        upload = dict(result.upload_bytes)
        self.assertEqual(upload[0], 0.0)
        self.assertEqual(upload[1_000_000], 600_000.0)

    def test_throughput_line_order(self):
        result = assemble(both_phase_run())
        lines = result.throughput_lines()
        self.assertEqual([line.name for line in lines], ['Both', 'Upload', 'Download'])
        self.assertEqual(len(lines[1].byte_series), 2)
        self.assertEqual(len(lines[2].byte_series), 2)

    def test_empty_group_is_present_but_empty(self):
        run = make_run(group(False, False))
        result = assemble(run)
        self.assertIsNotNone(result.upload_bytes)
        self.assertEqual(len(result.upload_bytes), 0)
        self.assertEqual([line.name for line in result.throughput_lines()], ['Upload'])

    def test_run_without_streams(self):
        result = assemble(make_run())
        self.assertEqual(result.throughput_lines(), [])
        self.assertEqual(len(result.combined_download), 0)


class TestInvariants(unittest.TestCase):
    """Broken runs abort assembly."""

    def test_both_phase_missing_upload_fails(self):
        run = make_run(
            group(True, False, [(0, 0), (1_000_000, 1_000)]),
            group(True, True, [(1_000_000, 0), (2_000_000, 1_000)]),
        )
        with self.assertRaises(MissingCategoryError):
            assemble(run)

    def test_both_phase_missing_download_fails(self):
        run = make_run(group(False, True, [(0, 0), (1_000_000, 1_000)]))
        with self.assertRaises(MissingCategoryError):
            assemble(run)

    def test_duplicate_category_fails(self):
        run = make_run(
            group(True, False, [(0, 0), (1_000_000, 1_000)]),
            group(True, False, [(0, 0), (1_000_000, 2_000)]),
        )
        with self.assertRaises(DuplicateCategoryError):
            ResultAssembler(run)


class TestOverlays(unittest.TestCase):
    """Per-stream cumulative overlays."""

    streams = [
        [(0, 0), (300_000, 90_000), (1_200_000, 400_000)],
        [(250_000, 0), (1_000_000, 150_000)],
        [(700_000, 0), (900_000, 10_000), (1_900_000, 600_000)],
    ]

    def setUp(self):
        self.result = assemble(make_run(group(False, False, *self.streams)))

    def test_one_overlay_per_stream(self):
        (overlay_group,) = self.result.stream_groups
        self.assertEqual(overlay_group.category, StreamCategory.UPLOAD_ONLY)
        self.assertFalse(overlay_group.download)
        self.assertEqual(len(overlay_group.overlays), 3)

    def test_first_overlay_is_first_stream(self):
        overlays = self.result.stream_groups[0].overlays
        self.assertEqual(overlays[0], resample(self.streams[0], INTERVAL_US))

    def test_overlays_match_prefix_aggregation(self):
        overlays = self.result.stream_groups[0].overlays
        for i in range(len(self.streams)):
            self.assertEqual(overlays[i], aggregate(self.streams[:i + 1], INTERVAL_US))

    def test_last_overlay_is_group_total(self):
        overlays = self.result.stream_groups[0].overlays
        self.assertEqual(overlays[-1], self.result.upload_bytes)


class TestRecordModel(unittest.TestCase):
    """Flags, categories and latency fields of the run model."""

    def test_category_from_flags(self):
        self.assertEqual(StreamCategory.from_flags(False, False), StreamCategory.UPLOAD_ONLY)
        self.assertEqual(StreamCategory.from_flags(True, False), StreamCategory.DOWNLOAD_ONLY)
        self.assertEqual(StreamCategory.from_flags(False, True), StreamCategory.BOTH_UPLOAD)
        self.assertEqual(StreamCategory.from_flags(True, True), StreamCategory.BOTH_DOWNLOAD)
        self.assertEqual(StreamCategory.BOTH_DOWNLOAD.label, 'both_download')

    def test_run_predicates(self):
        run = both_phase_run()
        self.assertEqual(run.streams(), 5)
        self.assertTrue(run.download())
        self.assertTrue(run.upload())
        self.assertTrue(run.both())

        run = make_run(group(True, False, [(0, 0)]))
        self.assertTrue(run.download())
        self.assertFalse(run.upload())
        self.assertFalse(run.both())

    def test_down_latency_derived_from_total(self):
        self.assertEqual(Latency(up_us=10, total_us=25).down_us, 15)
        self.assertEqual(Latency(up_us=10, down_us=12, total_us=25).down_us, 12)
        self.assertIsNone(Latency(up_us=10).down_us)


if __name__ == '__main__':
    unittest.main()
