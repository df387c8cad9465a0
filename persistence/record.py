"""
Data structures for a recorded test run.
"""

from typing import List, Optional, Sequence, Tuple

from common.categories import StreamCategory


class Latency:
    """Round-trip latency of one ping, split by direction when known."""

    def __init__(self, up_us: Optional[int] = None, down_us: Optional[int] = None,
                 total_us: Optional[int] = None):
        self.up_us = up_us
        self._down_us = down_us
        self.total_us = total_us

    @property
    def down_us(self) -> Optional[int]:
        if self._down_us is not None:
            return self._down_us
        if self.up_us is not None and self.total_us is not None:
            return self.total_us - self.up_us
        return None

    @property
    def recorded_down_us(self) -> Optional[int]:
        """Down latency exactly as recorded, without deriving it from total and up."""
        return self._down_us

    def __repr__(self):
        return f"Latency(up_us={self.up_us}, down_us={self.down_us}, total_us={self.total_us})"


class Ping:
    """A latency probe sent at ``sent_us``; ``latency`` is None when it was lost."""

    def __init__(self, sent_us: int, latency: Optional[Latency] = None):
        self.sent_us = sent_us
        self.latency = latency

    def __repr__(self):
        return f"Ping(sent_us={self.sent_us}, latency={self.latency!r})"


class StreamRecord:
    """Raw cumulative byte counters of one data stream."""

    def __init__(self, samples: Sequence[Tuple[int, int]]):
        self.samples: List[Tuple[int, int]] = [(int(t), int(b)) for t, b in samples]

    def __len__(self):
        return len(self.samples)


class StreamGroup:
    """Streams sharing a direction and a test phase."""

    def __init__(self, download: bool, both: bool, streams: Sequence[StreamRecord] = ()):
        self.download = bool(download)
        self.both = bool(both)
        self.streams: List[StreamRecord] = list(streams)

    @property
    def category(self) -> StreamCategory:
        return StreamCategory.from_flags(self.download, self.both)


class TestRun:
    """A complete, already-recorded test run.

    Times are microseconds. ``interval_us`` is the grid step used for every
    resampling of this run.
    """

    # Keep pytest from collecting this class
    __test__ = False

    def __init__(self, start_us: int, duration_us: int, interval_us: int,
                 stream_groups: Sequence[StreamGroup] = (),
                 pings: Sequence[Ping] = (),
                 peer_pings: Optional[Sequence[Ping]] = None,
                 version: int = 0, ipv6: bool = False,
                 stagger_us: int = 0, load_duration_us: int = 0,
                 server_latency_us: int = 0, generated_by: str = ""):
        self.start_us = start_us
        self.duration_us = duration_us
        self.interval_us = interval_us
        self.stream_groups: List[StreamGroup] = list(stream_groups)
        self.pings: List[Ping] = list(pings)
        self.peer_pings: Optional[List[Ping]] = list(peer_pings) if peer_pings is not None else None
        self.version = version
        self.ipv6 = ipv6
        self.stagger_us = stagger_us
        self.load_duration_us = load_duration_us
        self.server_latency_us = server_latency_us
        self.generated_by = generated_by

    def streams(self) -> int:
        """Total number of streams over all groups."""
        return sum(len(group.streams) for group in self.stream_groups)

    def download(self) -> bool:
        """Whether the run has a download-only phase."""
        return any(group.download and not group.both for group in self.stream_groups)

    def upload(self) -> bool:
        """Whether the run has an upload-only phase."""
        return any(not group.download and not group.both for group in self.stream_groups)

    def both(self) -> bool:
        """Whether the run has a phase with upload and download running together."""
        return any(group.both for group in self.stream_groups)
