"""
Assembly of the derived series of a test run.

Raw per-stream counters are grouped by category, merged per category and
across categories, and turned into the named series consumed by the
plotters.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, NamedTuple, Optional, Tuple

from common.categories import StreamCategory
from common.errors import DuplicateCategoryError, MissingCategoryError
from persistence.record import StreamGroup, TestRun
from .aggregate import aggregate
from .grid_series import GridSeries
from .rates import to_rate
from .resample import to_float

logger = logging.getLogger(__name__)


class OverlayGroup(NamedTuple):
    """Cumulative per-stream overlays of one stream group.

    ``overlays[i]`` is the sum of streams ``0..=i``; the last one is the
    group total.
    """

    category: StreamCategory
    overlays: Tuple[GridSeries, ...]

    @property
    def download(self) -> bool:
        return self.category.download

    @property
    def both(self) -> bool:
        return self.category.both


class ThroughputLine(NamedTuple):
    """A named rate series together with the byte series it summarises."""

    name: str
    rates: List[Tuple[int, float]]
    byte_series: Tuple[GridSeries, ...]


class DerivedResult:
    """Time-aligned series derived from one TestRun. Read-only once built."""

    def __init__(self, run: TestRun, category_bytes: Dict[StreamCategory, GridSeries],
                 combined_download: GridSeries, combined_upload: GridSeries,
                 both_total: Optional[GridSeries], stream_groups: List[OverlayGroup]):
        self._run = run
        self._category_bytes = MappingProxyType(dict(category_bytes))
        self._combined_download = combined_download
        self._combined_upload = combined_upload
        self._both_total = both_total
        self._stream_groups = tuple(stream_groups)

    @property
    def run(self) -> TestRun:
        return self._run

    @property
    def start_us(self) -> int:
        return self._run.start_us

    @property
    def duration_us(self) -> int:
        return self._run.duration_us

    @property
    def pings(self):
        return self._run.pings

    @property
    def peer_pings(self):
        return self._run.peer_pings

    @property
    def category_bytes(self):
        return self._category_bytes

    def bytes_for(self, category: StreamCategory) -> Optional[GridSeries]:
        """Merged byte series of ``category``, or None if the run has no such group."""
        return self._category_bytes.get(category)

    @property
    def download_bytes(self) -> Optional[GridSeries]:
        return self.bytes_for(StreamCategory.DOWNLOAD_ONLY)

    @property
    def upload_bytes(self) -> Optional[GridSeries]:
        return self.bytes_for(StreamCategory.UPLOAD_ONLY)

    @property
    def both_download_bytes(self) -> Optional[GridSeries]:
        return self.bytes_for(StreamCategory.BOTH_DOWNLOAD)

    @property
    def both_upload_bytes(self) -> Optional[GridSeries]:
        return self.bytes_for(StreamCategory.BOTH_UPLOAD)

    @property
    def combined_download(self) -> GridSeries:
        return self._combined_download

    @property
    def combined_upload(self) -> GridSeries:
        return self._combined_upload

    @property
    def has_both_total(self) -> bool:
        return self._both_total is not None

    @property
    def both_total(self) -> GridSeries:
        if self._both_total is None:
            raise MissingCategoryError("Test run has no phase with upload and download running together")
        return self._both_total

    @property
    def stream_groups(self) -> Tuple[OverlayGroup, ...]:
        return self._stream_groups

    def _present(self, *categories: StreamCategory) -> Tuple[GridSeries, ...]:
        return tuple(
            self._category_bytes[category] for category in categories
            if category in self._category_bytes
        )

    def throughput_lines(self) -> List[ThroughputLine]:
        """Named throughput series in drawing order: Both, Upload, Download."""
        lines = []

        if self.has_both_total:
            lines.append(ThroughputLine("Both", to_rate(self._both_total), (self._both_total,)))

        upload = self._present(StreamCategory.UPLOAD_ONLY, StreamCategory.BOTH_UPLOAD)
        if upload:
            lines.append(ThroughputLine("Upload", to_rate(self._combined_upload), upload))

        download = self._present(StreamCategory.DOWNLOAD_ONLY, StreamCategory.BOTH_DOWNLOAD)
        if download:
            lines.append(ThroughputLine("Download", to_rate(self._combined_download), download))

        return lines


class ResultAssembler:
    """Builds the DerivedResult of a TestRun."""

    def __init__(self, run: TestRun):
        self.run = run
        self.interval = run.interval_us
        self.groups = self._index_groups(run.stream_groups)

    @staticmethod
    def _index_groups(groups: List[StreamGroup]) -> Dict[StreamCategory, StreamGroup]:
        indexed = {}
        for group in groups:
            category = group.category
            if category in indexed:
                raise DuplicateCategoryError(f"Test run has more than one {category.label} stream group")
            indexed[category] = group
        return indexed

    def _overlays(self, group: StreamGroup) -> OverlayGroup:
        overlays = []
        previous = None
        for stream in group.streams:
            parts = [to_float(stream.samples)]
            if previous is not None:
                parts.insert(0, previous)
            previous = aggregate(parts, self.interval)
            overlays.append(previous)
        return OverlayGroup(group.category, tuple(overlays))

    def _merge_category(self, group: StreamGroup) -> GridSeries:
        return aggregate([to_float(stream.samples) for stream in group.streams], self.interval)

    def _both_total(self, category_bytes: Dict[StreamCategory, GridSeries]) -> Optional[GridSeries]:
        if not self.run.both():
            return None
        missing = [
            category.label
            for category in (StreamCategory.BOTH_DOWNLOAD, StreamCategory.BOTH_UPLOAD)
            if category not in category_bytes
        ]
        if missing:
            raise MissingCategoryError(
                f"Test run has a combined phase but no {', '.join(missing)} stream group"
            )
        return aggregate(
            [category_bytes[StreamCategory.BOTH_DOWNLOAD], category_bytes[StreamCategory.BOTH_UPLOAD]],
            self.interval,
        )

    def assemble(self) -> DerivedResult:
        """Derive every series of the run.

        Raises:
            DuplicateCategoryError: two stream groups share a category
            MissingCategoryError: a combined phase lacks one of its directions
        """
        stream_groups = [self._overlays(group) for group in self.run.stream_groups]

        category_bytes = {
            category: self._merge_category(group)
            for category, group in self.groups.items()
        }

        def combine(*categories: StreamCategory) -> GridSeries:
            present = [category_bytes[c] for c in categories if c in category_bytes]
            return aggregate(present, self.interval)

        combined_download = combine(StreamCategory.DOWNLOAD_ONLY, StreamCategory.BOTH_DOWNLOAD)
        combined_upload = combine(StreamCategory.UPLOAD_ONLY, StreamCategory.BOTH_UPLOAD)
        both_total = self._both_total(category_bytes)

        logger.info(
            f"Assembled {len(category_bytes)} categories from {self.run.streams()} streams "
            f"at {self.interval} us intervals"
        )

        return DerivedResult(
            self.run,
            category_bytes,
            combined_download,
            combined_upload,
            both_total,
            stream_groups,
        )


def assemble(run: TestRun) -> DerivedResult:
    """Build the DerivedResult of ``run``."""
    return ResultAssembler(run).assemble()
