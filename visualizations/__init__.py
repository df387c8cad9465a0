"""
Plot visualization modules for test run results.
"""

from .base import BasePlotter, PlotConfig
from .throughput_plots import ThroughputPlotter
from .latency_plots import LatencyPlotter
from .dashboard import DashboardPlotter

__all__ = ['BasePlotter', 'PlotConfig', 'ThroughputPlotter', 'LatencyPlotter', 'DashboardPlotter']
