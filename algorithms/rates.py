"""
Conversion of cumulative byte series into rate series.
"""

import logging
from typing import List, Sequence, Tuple

from common.errors import InvariantViolation
from common.metrics_utils import calculate_rate_mbps
from configuration import RATE_SENTINEL_OFFSET_US

logger = logging.getLogger(__name__)


def to_rate(series: Sequence[Tuple[int, float]]) -> List[Tuple[int, float]]:
    """
    Turn cumulative bytes into megabits per second by finite differences.

    The first sample has rate 0. A non-empty result is framed by zero
    points one microsecond outside the measured range: the leading one is
    left out when the series starts at 0.

    Args:
        series: Cumulative ``(timestamp_us, bytes)`` samples with strictly
            increasing timestamps

    Returns:
        List of ``(timestamp_us, rate_mbps)`` pairs

    Raises:
        InvariantViolation: two consecutive samples share a timestamp
    """
    samples = list(series)
    rates = []

    for i, (timestamp, value) in enumerate(samples):
        if i == 0:
            rates.append((timestamp, 0.0))
            continue
        prev_timestamp, prev_value = samples[i - 1]
        elapsed = timestamp - prev_timestamp
        if elapsed <= 0:
            raise InvariantViolation(
                f"Rate series needs strictly increasing timestamps, got {prev_timestamp} then {timestamp}"
            )
        rates.append((timestamp, calculate_rate_mbps(value - prev_value, elapsed)))

    if rates:
        first = rates[0][0]
        if first >= RATE_SENTINEL_OFFSET_US:
            rates.insert(0, (first - RATE_SENTINEL_OFFSET_US, 0.0))
        rates.append((rates[-1][0] + RATE_SENTINEL_OFFSET_US, 0.0))

    return rates
