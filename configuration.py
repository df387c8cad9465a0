"""
Configuration constants for the throughput series pipeline.

This module contains all configuration parameters including:
- Unit conversion factors (time, bits, bytes)
- Scale bound fallbacks and headroom used by the plotters
- Plot geometry, fonts and colours
- CLI and logging defaults
"""

import os
from typing import Tuple

# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

MICROS_PER_SECOND: int = 1_000_000
MILLIS_PER_SECOND: int = 1000
MICROS_PER_MILLI: int = 1000
BITS_PER_BYTE: int = 8
BITS_PER_MEGABIT: int = 1_000_000  # 1 Megabit = 1,000,000 bits
BYTES_PER_GIB: int = 1024 * 1024 * 1024

# Offset of the synthetic zero points surrounding a rate series
RATE_SENTINEL_OFFSET_US: int = 1

# =============================================================================
# SCALE BOUNDS
# =============================================================================

FALLBACK_SCALE_MAX: float = 100.0  # Used when no finite value is available
DEFAULT_MAX_LATENCY_MS: float = 100.0  # Latency axis bound when no ping completed
SCALE_HEADROOM: float = 1.05  # Axis maximum = data maximum * headroom
DURATION_LEGEND_PADDING: float = 1.08  # Extra x range so the legend does not cover data

# =============================================================================
# PLOT CONFIGURATION
# =============================================================================

DEFAULT_PLOT_TITLE: str = "Latency under load"
DEFAULT_PLOT_WIDTH: int = 1280  # Pixels
DEFAULT_PLOT_HEIGHT: int = 720  # Pixels
PEER_LATENCY_EXTRA_HEIGHT: int = 380  # Added to the default height when peer latency is present
PLOT_DPI: int = 100

TITLE_FONT_SIZE: int = 20
LABEL_FONT_SIZE: int = 12
SMALL_FONT_SIZE: int = 10

PLOT_BACKGROUND_COLOR: str = "#f8f8f8"

RGB = Tuple[int, int, int]

UP_COLOR: RGB = (37, 83, 169)
DOWN_COLOR: RGB = (95, 145, 62)
BOTH_COLOR: RGB = (149, 96, 153)
TOTAL_LATENCY_COLOR: RGB = (50, 50, 50)
LEGACY_LOSS_COLOR: RGB = (193, 85, 85)

# Alternating colours for partial per-stream overlays in the split throughput view
DOWN_OVERLAY_COLORS: Tuple[RGB, RGB] = ((188, 203, 177), (215, 223, 208))
UP_OVERLAY_COLORS: Tuple[RGB, RGB] = ((159, 172, 202), (211, 217, 231))

# Fraction of the packet loss strip drawn bold at the end of a loss tick
LOSS_BOLD_SIZE: float = 0.1111

# Packet loss ticks distinguish the loss direction from this format version on
LOSS_DIRECTION_MIN_VERSION: int = 2
# Run metadata header is drawn from this format version on
HEADER_MIN_VERSION: int = 1

# =============================================================================
# CLI DEFAULTS
# =============================================================================

DEFAULT_PLOTS_DIR: str = os.getenv("PLOTS_DIR", "plots")
DEFAULT_PLOT_PREFIX: str = "plot"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
