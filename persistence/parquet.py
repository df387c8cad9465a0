"""
Parquet persistence for recorded test runs and derived series.
"""

import os
import logging
from typing import List, Optional

import pandas as pd

from persistence.record import Latency, Ping, StreamGroup, StreamRecord, TestRun

logger = logging.getLogger(__name__)

RUN_FILE = "run.parquet"
GROUPS_FILE = "groups.parquet"
STREAMS_FILE = "streams.parquet"
PINGS_FILE = "pings.parquet"


def _optional_int(value) -> Optional[int]:
    return None if pd.isna(value) else int(value)


class RunParquetStore:
    """Stores a TestRun as a directory of Parquet files.

    Layout:
        run.parquet: one row of run scalars and metadata
        groups.parquet: one row per stream group
        streams.parquet: one row per raw stream sample
        pings.parquet: one row per latency probe, local and peer

    Attributes:
        run_dir: Directory holding the Parquet files
    """

    def __init__(self, run_dir: str):
        """Initialize the store.

        Args:
            run_dir: Directory for the run files
        """
        self.run_dir: str = run_dir

    def _path(self, name: str) -> str:
        return os.path.join(self.run_dir, name)

    def save(self, run: TestRun) -> str:
        """Write ``run`` to the run directory.

        Args:
            run: Test run to store

        Returns:
            Path of the run directory
        """
        os.makedirs(self.run_dir, exist_ok=True)

        pd.DataFrame([{
            'start_us': run.start_us,
            'duration_us': run.duration_us,
            'interval_us': run.interval_us,
            'version': run.version,
            'ipv6': run.ipv6,
            'stagger_us': run.stagger_us,
            'load_duration_us': run.load_duration_us,
            'server_latency_us': run.server_latency_us,
            'generated_by': run.generated_by,
            'has_peer_pings': run.peer_pings is not None,
        }]).to_parquet(self._path(RUN_FILE), index=False)

        groups = []
        samples = []
        for group_index, group in enumerate(run.stream_groups):
            groups.append({
                'group_index': group_index,
                'download': group.download,
                'both': group.both,
                'stream_count': len(group.streams),
            })
            for stream_index, stream in enumerate(group.streams):
                for timestamp, byte_count in stream.samples:
                    samples.append({
                        'group_index': group_index,
                        'stream_index': stream_index,
                        'timestamp_us': timestamp,
                        'bytes': byte_count,
                    })

        pd.DataFrame(groups, columns=['group_index', 'download', 'both', 'stream_count']).to_parquet(
            self._path(GROUPS_FILE), index=False)
        pd.DataFrame(samples, columns=['group_index', 'stream_index', 'timestamp_us', 'bytes']).astype(
            'int64').to_parquet(self._path(STREAMS_FILE), index=False)

        pings = [(False, ping) for ping in run.pings]
        pings += [(True, ping) for ping in (run.peer_pings or [])]
        self._pings_frame(pings).to_parquet(self._path(PINGS_FILE), index=False)

        logger.info(f"Saved test run with {run.streams()} streams and {len(run.pings)} pings to {self.run_dir}")
        return self.run_dir

    @staticmethod
    def _pings_frame(pings) -> pd.DataFrame:
        def field(name):
            return pd.array(
                [getattr(ping.latency, name) if ping.latency is not None else None for _, ping in pings],
                dtype='Int64',
            )

        return pd.DataFrame({
            'peer': pd.array([peer for peer, _ in pings], dtype=bool),
            'sent_us': pd.array([ping.sent_us for _, ping in pings], dtype='int64'),
            'has_latency': pd.array([ping.latency is not None for _, ping in pings], dtype=bool),
            'up_us': field('up_us'),
            'down_us': field('recorded_down_us'),
            'total_us': field('total_us'),
        })

    def load(self) -> TestRun:
        """Read the run directory back into a TestRun.

        Raises:
            FileNotFoundError: a required Parquet file is missing
        """
        run_row = pd.read_parquet(self._path(RUN_FILE)).iloc[0]
        groups_df = pd.read_parquet(self._path(GROUPS_FILE))
        streams_df = pd.read_parquet(self._path(STREAMS_FILE))
        pings_df = pd.read_parquet(self._path(PINGS_FILE))

        stream_groups = []
        for group in groups_df.sort_values('group_index').itertuples(index=False):
            group_samples = streams_df[streams_df['group_index'] == group.group_index]
            streams = []
            for stream_index in range(int(group.stream_count)):
                rows = group_samples[group_samples['stream_index'] == stream_index]
                streams.append(StreamRecord(zip(rows['timestamp_us'].tolist(), rows['bytes'].tolist())))
            stream_groups.append(StreamGroup(bool(group.download), bool(group.both), streams))

        pings = self._pings_from_frame(pings_df[~pings_df['peer']])
        peer_pings = None
        if bool(run_row['has_peer_pings']):
            peer_pings = self._pings_from_frame(pings_df[pings_df['peer']])

        run = TestRun(
            start_us=int(run_row['start_us']),
            duration_us=int(run_row['duration_us']),
            interval_us=int(run_row['interval_us']),
            stream_groups=stream_groups,
            pings=pings,
            peer_pings=peer_pings,
            version=int(run_row['version']),
            ipv6=bool(run_row['ipv6']),
            stagger_us=int(run_row['stagger_us']),
            load_duration_us=int(run_row['load_duration_us']),
            server_latency_us=int(run_row['server_latency_us']),
            generated_by=str(run_row['generated_by']),
        )
        logger.info(f"Loaded test run with {run.streams()} streams and {len(pings)} pings from {self.run_dir}")
        return run

    @staticmethod
    def _pings_from_frame(frame: pd.DataFrame) -> List[Ping]:
        pings = []
        for row in frame.itertuples(index=False):
            latency = None
            if row.has_latency:
                latency = Latency(
                    up_us=_optional_int(row.up_us),
                    down_us=_optional_int(row.down_us),
                    total_us=_optional_int(row.total_us),
                )
            pings.append(Ping(int(row.sent_us), latency))
        return pings


def derived_frame(result) -> pd.DataFrame:
    """Long-form table of every byte and rate series of a DerivedResult.

    Columns: series, kind ('bytes' or 'rate_mbps'), timestamp_us, value.
    """
    rows = []

    def add(name, kind, series):
        rows.extend(
            {'series': name, 'kind': kind, 'timestamp_us': timestamp, 'value': value}
            for timestamp, value in series
        )

    for category, series in result.category_bytes.items():
        add(category.label, 'bytes', series)
    add('combined_download', 'bytes', result.combined_download)
    add('combined_upload', 'bytes', result.combined_upload)
    for line in result.throughput_lines():
        add(line.name.lower(), 'rate_mbps', line.rates)
    if result.has_both_total:
        add('both_total', 'bytes', result.both_total)

    return pd.DataFrame(rows, columns=['series', 'kind', 'timestamp_us', 'value'])


def export_derived(result, path: str) -> str:
    """Write the derived series of ``result`` to a Parquet file.

    Args:
        result: DerivedResult to export
        path: Output file path

    Returns:
        Path to the written file
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    df = derived_frame(result)
    df.to_parquet(path, index=False)
    logger.info(f"Exported {len(df)} derived samples to {path}")
    return path
