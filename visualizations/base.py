"""
Base classes for plot visualization.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from configuration import (
    DEFAULT_PLOT_TITLE,
    DURATION_LEGEND_PADDING,
    LABEL_FONT_SIZE,
    PLOT_BACKGROUND_COLOR,
    RGB,
    SMALL_FONT_SIZE,
)
from common.metrics_utils import micros_to_seconds

logger = logging.getLogger(__name__)


class PlotConfig:
    """User options for the rendered graph.

    Attributes:
        split_throughput: Draw one chart per direction with per-stream overlays
        transferred: Add a chart of the data transferred
        max_throughput: Minimum throughput axis bound in bits per second
        max_latency: Minimum latency axis bound in milliseconds
        width: Image width in pixels (default from configuration)
        height: Image height in pixels (default depends on peer latency)
        title: Graph title
    """

    def __init__(self, split_throughput: bool = False, transferred: bool = False,
                 max_throughput: Optional[int] = None, max_latency: Optional[int] = None,
                 width: Optional[int] = None, height: Optional[int] = None,
                 title: Optional[str] = None):
        self.split_throughput = split_throughput
        self.transferred = transferred
        self.max_throughput = max_throughput
        self.max_latency = max_latency
        self.width = width
        self.height = height
        self.title = title or DEFAULT_PLOT_TITLE


def to_mpl_color(color: RGB) -> Tuple[float, float, float]:
    """Convert an 8-bit RGB triple to a matplotlib colour."""
    return tuple(channel / 255.0 for channel in color)


class BasePlotter:
    """Base class for all plotters with common functionality."""

    def __init__(self, result, config: PlotConfig):
        self.result = result
        self.config = config

    @property
    def start_seconds(self) -> float:
        return micros_to_seconds(self.result.start_us)

    @property
    def axis_duration(self) -> float:
        """Length of the x axis in seconds, padded so the legend fits."""
        return micros_to_seconds(self.result.duration_us) * DURATION_LEGEND_PADDING

    def elapsed(self, series: Iterable[Tuple[int, float]], scale: float = 1.0) -> Tuple[List[float], List[float]]:
        """Split a series into x (seconds since run start) and y (value * scale) lists."""
        xs, ys = [], []
        for timestamp, value in series:
            xs.append(micros_to_seconds(timestamp) - self.start_seconds)
            ys.append(value * scale)
        return xs, ys

    def prepare_axes(self, ax, y_max: float, y_label: str, x_label: Optional[str] = None):
        """Apply the common chart frame to ``ax``."""
        ax.set_xlim(0.0, self.axis_duration)
        ax.set_ylim(0.0, y_max)
        ax.set_facecolor(PLOT_BACKGROUND_COLOR)
        ax.set_ylabel(y_label, fontsize=LABEL_FONT_SIZE)
        ax.tick_params(labelsize=SMALL_FONT_SIZE)
        ax.grid(False)
        if x_label is not None:
            ax.set_xlabel(x_label, fontsize=LABEL_FONT_SIZE)
            ax.set_yticks([])
        return ax

    @staticmethod
    def add_legend(ax, handles):
        if handles:
            ax.legend(handles=handles, loc='upper right', fontsize=SMALL_FONT_SIZE,
                      framealpha=0.8, edgecolor='black')
