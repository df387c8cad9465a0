"""
Full test run graph: header, throughput, latency, packet loss and data transferred.
"""

import logging
import os
from datetime import datetime
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt

from .base import PlotConfig
from .latency_plots import LatencyPlotter
from .throughput_plots import ThroughputPlotter
from common.metrics_utils import micros_to_seconds
from configuration import (
    DEFAULT_PLOT_HEIGHT,
    DEFAULT_PLOT_PREFIX,
    DEFAULT_PLOT_WIDTH,
    HEADER_MIN_VERSION,
    MILLIS_PER_SECOND,
    PEER_LATENCY_EXTRA_HEIGHT,
    PLOT_DPI,
    SMALL_FONT_SIZE,
    TITLE_FONT_SIZE,
)

logger = logging.getLogger(__name__)

HEADER_HEIGHT_PX = 60
LOSS_HEIGHT_PX = 70
MIN_CHART_HEIGHT_PX = 50


def unique_path(output_dir: str, prefix: str, extension: str) -> str:
    """Timestamped file path in ``output_dir`` that does not exist yet."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = os.path.join(output_dir, f"{prefix}_{timestamp}.{extension}")
    counter = 1
    while os.path.exists(path):
        path = os.path.join(output_dir, f"{prefix}_{timestamp}_{counter}.{extension}")
        counter += 1
    return path


class DashboardPlotter:
    """Composes the charts of a DerivedResult into one image."""

    def __init__(self, result, config: Optional[PlotConfig] = None):
        self.result = result
        self.config = config or PlotConfig()
        self.run = result.run
        self.throughput_plotter = ThroughputPlotter(result, self.config)
        self.latency_plotter = LatencyPlotter(result, self.config)

    def image_size(self) -> Tuple[int, int]:
        height = DEFAULT_PLOT_HEIGHT
        if self.run.peer_pings is not None:
            height += PEER_LATENCY_EXTRA_HEIGHT
        return (self.config.width or DEFAULT_PLOT_WIDTH, self.config.height or height)

    def chart_layout(self) -> List[tuple]:
        """Charts to draw from top to bottom, as ``(kind, argument)`` pairs."""
        charts = []
        has_streams = self.run.streams() > 0

        if has_streams:
            if self.config.split_throughput:
                if self.run.download() or self.run.both():
                    charts.append(('split_throughput', True))
                if self.run.upload() or self.run.both():
                    charts.append(('split_throughput', False))
            else:
                charts.append(('throughput', None))

        charts.append(('latency', False))
        charts.append(('packet_loss', False))

        if self.run.peer_pings is not None:
            charts.append(('latency', True))
            charts.append(('packet_loss', True))

        if has_streams and self.config.transferred:
            charts.append(('transferred', None))

        return charts

    def _draw_header(self, fig):
        fig.text(0.5, 1.0 - 25 / (fig.get_figheight() * PLOT_DPI), self.config.title,
                 ha='center', va='center', fontsize=TITLE_FONT_SIZE)

        if self.run.version < HEADER_MIN_VERSION:
            return

        top = 1.0 - 12 / (fig.get_figheight() * PLOT_DPI)
        second = 1.0 - 32 / (fig.get_figheight() * PLOT_DPI)
        left = 100 / (fig.get_figwidth() * PLOT_DPI)
        column = 280 / (fig.get_figwidth() * PLOT_DPI)

        entries = [
            (left, top, f"Load duration: {micros_to_seconds(self.run.load_duration_us):.2f} s"),
            (column, top, f"Server latency: "
                          f"{micros_to_seconds(self.run.server_latency_us) * MILLIS_PER_SECOND:.2f} ms"),
            (left, second, f"Connections: {self.run.streams()} over IPv{6 if self.run.ipv6 else 4}"),
            (column, second, f"Stagger: {micros_to_seconds(self.run.stagger_us)} s"),
        ]
        for x, y, text in entries:
            fig.text(x, y, text, ha='left', va='top', fontsize=SMALL_FONT_SIZE)

        if self.run.generated_by:
            fig.text(1.0 - left, 1.0 - 25 / (fig.get_figheight() * PLOT_DPI), self.run.generated_by,
                     ha='right', va='center', fontsize=SMALL_FONT_SIZE)

    def draw(self):
        """Render the graph and return the matplotlib figure."""
        width, height = self.image_size()
        charts = self.chart_layout()
        lines = self.result.throughput_lines()

        main_charts = sum(1 for kind, _ in charts if kind != 'packet_loss')
        loss_charts = len(charts) - main_charts
        chart_px = max(
            (height - HEADER_HEIGHT_PX - loss_charts * LOSS_HEIGHT_PX) / main_charts,
            MIN_CHART_HEIGHT_PX,
        )
        ratios = [LOSS_HEIGHT_PX if kind == 'packet_loss' else chart_px for kind, _ in charts]

        fig = plt.figure(figsize=(width / PLOT_DPI, height / PLOT_DPI), dpi=PLOT_DPI)
        grid = fig.add_gridspec(
            len(charts), 1, height_ratios=ratios,
            top=1.0 - HEADER_HEIGHT_PX / height, bottom=0.06, left=0.08, right=0.92, hspace=0.25,
        )
        self._draw_header(fig)

        for index, (kind, argument) in enumerate(charts):
            ax = fig.add_subplot(grid[index, 0])
            if kind == 'throughput':
                self.throughput_plotter.plot_throughput(ax, lines)
            elif kind == 'split_throughput':
                self.throughput_plotter.plot_split_throughput(ax, download=argument)
            elif kind == 'latency':
                pings = self.run.peer_pings if argument else self.run.pings
                self.latency_plotter.plot_latency(ax, pings, peer=argument)
            elif kind == 'packet_loss':
                pings = self.run.peer_pings if argument else self.run.pings
                self.latency_plotter.plot_packet_loss(ax, pings, peer=argument)
            elif kind == 'transferred':
                self.throughput_plotter.plot_bytes_transferred(ax, lines)

        return fig

    def save_graph_to_path(self, path: str) -> Optional[str]:
        """Render the graph to a PNG file at ``path``."""
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            fig = self.draw()
            fig.savefig(path, dpi=PLOT_DPI, format='png')
            plt.close(fig)

            logger.info(f"Created test run graph: {path}")
            return path

        except Exception as e:
            logger.error(f"Failed to create test run graph: {e}")
            return None

    def create_graph(self, output_dir: str, prefix: str = DEFAULT_PLOT_PREFIX) -> Optional[str]:
        """Render the graph to a new timestamped PNG file in ``output_dir``."""
        os.makedirs(output_dir, exist_ok=True)
        return self.save_graph_to_path(unique_path(output_dir, prefix, 'png'))
