"""
Throughput visualization plots.
"""

import logging

from matplotlib.patches import Patch

from .base import BasePlotter, to_mpl_color
from algorithms.rates import to_rate
from common.metrics_utils import bytes_to_gib, scale_bound
from configuration import (
    BITS_PER_MEGABIT,
    BOTH_COLOR,
    DOWN_COLOR,
    DOWN_OVERLAY_COLORS,
    UP_COLOR,
    UP_OVERLAY_COLORS,
)

logger = logging.getLogger(__name__)

LINE_COLORS = {
    'Both': BOTH_COLOR,
    'Upload': UP_COLOR,
    'Download': DOWN_COLOR,
}


class ThroughputPlotter(BasePlotter):
    """Plotter for throughput and data transferred charts."""

    def _throughput_bound(self, values) -> float:
        minimum = None
        if self.config.max_throughput is not None:
            minimum = self.config.max_throughput / BITS_PER_MEGABIT
        return scale_bound(values, minimum)

    def plot_throughput(self, ax, lines):
        """Draw the combined Both/Upload/Download rate lines on ``ax``."""
        y_max = self._throughput_bound(rate for line in lines for _, rate in line.rates)
        self.prepare_axes(ax, y_max, 'Throughput (Mbps)')

        handles = []
        for line in lines:
            color = to_mpl_color(LINE_COLORS[line.name])
            xs, ys = self.elapsed(line.rates)
            ax.plot(xs, ys, color=color, linewidth=1)
            handles.append(Patch(color=color, label=line.name))

        self.add_legend(ax, handles)
        return ax

    def plot_split_throughput(self, ax, download: bool):
        """Draw per-stream overlay rates of one direction on ``ax``.

        Each group's overlays are drawn from the first partial sum to the group
        total; the total gets the direction colour, partial sums alternate
        between two lighter shades.
        """
        groups = [
            [to_rate(overlay) for overlay in group.overlays]
            for group in self.result.stream_groups
            if group.download == download and group.overlays
        ]

        y_max = self._throughput_bound(rate for rates in groups for _, rate in rates[-1])
        self.prepare_axes(ax, y_max, 'Download (Mbps)' if download else 'Upload (Mbps)')

        main_color = DOWN_COLOR if download else UP_COLOR
        shades = DOWN_OVERLAY_COLORS if download else UP_OVERLAY_COLORS

        for rates in groups:
            for i, overlay_rates in enumerate(rates):
                main = i == len(rates) - 1
                color = main_color if main else shades[i & 1]
                xs, ys = self.elapsed(overlay_rates)
                ax.plot(xs, ys, color=to_mpl_color(color), linewidth=1, zorder=2 if main else 1)

        return ax

    def plot_bytes_transferred(self, ax, lines):
        """Draw the cumulative data transferred, in GiB, behind each throughput line."""
        y_max = scale_bound(
            value for line in lines for series in line.byte_series for _, value in series
        )
        y_max = bytes_to_gib(y_max)
        self.prepare_axes(ax, y_max, 'Data transferred (GiB)')

        handles = []
        for line in lines:
            color = to_mpl_color(LINE_COLORS[line.name])
            for series in line.byte_series:
                xs, ys = self.elapsed(series, scale=bytes_to_gib(1))
                ax.plot(xs, ys, color=color, linewidth=1)
            handles.append(Patch(color=color, label=line.name))

        self.add_legend(ax, handles)
        return ax
