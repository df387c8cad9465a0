"""
Latency and packet loss visualization plots.
"""

import logging
from typing import Callable, List, Optional

from matplotlib.patches import Patch

from .base import BasePlotter, to_mpl_color
from common.metrics_utils import micros_to_seconds
from configuration import (
    DEFAULT_MAX_LATENCY_MS,
    DOWN_COLOR,
    LEGACY_LOSS_COLOR,
    LOSS_BOLD_SIZE,
    LOSS_DIRECTION_MIN_VERSION,
    MICROS_PER_MILLI,
    SCALE_HEADROOM,
    TOTAL_LATENCY_COLOR,
    UP_COLOR,
)
from persistence.record import Latency, Ping

logger = logging.getLogger(__name__)

LATENCY_FIELDS = [
    ('Up', UP_COLOR, lambda latency: latency.up_us),
    ('Down', DOWN_COLOR, lambda latency: latency.down_us),
    ('Total', TOTAL_LATENCY_COLOR, lambda latency: latency.total_us),
]


def latency_segments(pings: List[Ping], start_seconds: float,
                     get_latency: Callable[[Latency], Optional[int]]) -> List[list]:
    """Split pings into runs of consecutive measured latencies.

    A ping without latency, or without the requested field, ends the
    current run. Points are ``(seconds since start, latency ms)``.
    """
    segments = []
    current = []
    for ping in pings:
        value = get_latency(ping.latency) if ping.latency is not None else None
        if value is None:
            if current:
                segments.append(current)
            current = []
            continue
        current.append((micros_to_seconds(ping.sent_us) - start_seconds, value / MICROS_PER_MILLI))
    if current:
        segments.append(current)
    return segments


class LatencyPlotter(BasePlotter):
    """Plotter for latency and packet loss charts."""

    def latency_bound(self, pings: List[Ping]) -> float:
        totals = [
            ping.latency.total_us for ping in pings
            if ping.latency is not None and ping.latency.total_us is not None
        ]
        max_latency = max(totals) / MICROS_PER_MILLI if totals else DEFAULT_MAX_LATENCY_MS
        max_latency *= SCALE_HEADROOM
        if self.config.max_latency is not None and self.config.max_latency > max_latency:
            max_latency = float(self.config.max_latency)
        return max_latency

    def plot_latency(self, ax, pings: List[Ping], peer: bool = False):
        """Draw Up/Down/Total latency lines on ``ax``; isolated samples become dots."""
        self.prepare_axes(ax, self.latency_bound(pings), 'Peer latency (ms)' if peer else 'Latency (ms)')

        handles = []
        for name, color, get_latency in LATENCY_FIELDS:
            color = to_mpl_color(color)
            for segment in latency_segments(pings, self.start_seconds, get_latency):
                xs = [x for x, _ in segment]
                ys = [y for _, y in segment]
                if len(segment) == 1:
                    ax.plot(xs, ys, linestyle='none', marker='o', markersize=2, color=color)
                else:
                    ax.plot(xs, ys, color=color, linewidth=1)
            handles.append(Patch(color=color, label=name))

        self.add_legend(ax, handles)
        return ax

    def plot_packet_loss(self, ax, pings: List[Ping], peer: bool = False):
        """Draw a tick for every ping without a total latency.

        From format version 2 on, a ping that never came back is drawn from
        the bottom in the upload colour and a ping whose reply was lost is
        drawn from the top in the download colour; older runs get a full
        height tick.
        """
        self.prepare_axes(ax, 1.0, 'Peer loss' if peer else 'Packet loss', x_label='Elapsed time (seconds)')

        directional = self.result.run.version >= LOSS_DIRECTION_MIN_VERSION
        lost = 0
        for ping in pings:
            if ping.latency is not None and ping.latency.total_us is not None:
                continue
            lost += 1
            x = micros_to_seconds(ping.sent_us) - self.start_seconds
            if directional:
                if ping.latency is None:
                    color, start, end, bold = UP_COLOR, 0.0, 0.5, LOSS_BOLD_SIZE
                else:
                    color, start, end, bold = DOWN_COLOR, 1.0, 0.5, 1.0 - LOSS_BOLD_SIZE
            else:
                color, start, end, bold = LEGACY_LOSS_COLOR, 0.0, 1.0, None
            color = to_mpl_color(color)
            ax.plot([x, x], [start, end], color=color, linewidth=1)
            if bold is not None:
                ax.plot([x, x], [start, bold], color=color, linewidth=2)

        ax.plot([0.0, self.axis_duration], [1.0, 1.0], color='black', linewidth=1)

        logger.debug(f"Drew {lost} lost {'peer ' if peer else ''}pings")
        return ax
