"""
Shared utilities for throughput metrics: unit conversions, rates and scale bounds.
"""

import logging
from typing import Iterable, Optional

import numpy as np

from configuration import (
    BITS_PER_BYTE,
    BITS_PER_MEGABIT,
    BYTES_PER_GIB,
    FALLBACK_SCALE_MAX,
    MICROS_PER_SECOND,
    SCALE_HEADROOM,
)

logger = logging.getLogger(__name__)


def micros_to_seconds(micros: float) -> float:
    """Convert a duration or timestamp in microseconds to seconds."""
    return micros / MICROS_PER_SECOND


def bytes_to_gib(total_bytes: float) -> float:
    """
    Convert bytes to gibibytes (GiB).

    This is a shared utility to ensure consistent data size conversions.

    Args:
        total_bytes: Total bytes

    Returns:
        Size in gibibytes (GiB)
    """
    return total_bytes / BYTES_PER_GIB


def calculate_rate_mbps(delta_bytes: float, elapsed_us: int) -> float:
    """
    Calculate a transfer rate in megabits per second (Mbps).

    The caller guarantees a positive elapsed time; see ``algorithms.rates``.

    Args:
        delta_bytes: Bytes transferred during the interval
        elapsed_us: Length of the interval in microseconds

    Returns:
        Rate in megabits per second (Mbps)
    """
    megabits = (delta_bytes * BITS_PER_BYTE) / BITS_PER_MEGABIT
    return megabits / micros_to_seconds(elapsed_us)


def robust_max(values: Iterable[float]) -> float:
    """
    Maximum of the finite values, or a fixed fallback when there are none.

    NaN and infinite inputs carry no information and are skipped. Used to
    pick axis bounds, so it never fails.

    Args:
        values: Any iterable of numbers (may be empty)

    Returns:
        The largest finite value, or ``FALLBACK_SCALE_MAX`` (100.0)
    """
    data = np.fromiter(values, dtype=float)
    finite = data[np.isfinite(data)]
    if finite.size == 0:
        return FALLBACK_SCALE_MAX
    return float(finite.max())


def scale_bound(values: Iterable[float], minimum: Optional[float] = None) -> float:
    """
    Axis bound for a chart: robust maximum plus headroom, raised to ``minimum``.

    Args:
        values: Values plotted on the axis
        minimum: Optional user supplied lower limit for the bound

    Returns:
        Upper bound for the axis
    """
    bound = robust_max(values) * SCALE_HEADROOM
    if minimum is not None and minimum > bound:
        logger.debug(f"Raising axis bound from {bound:.2f} to configured {minimum:.2f}")
        bound = minimum
    return bound
