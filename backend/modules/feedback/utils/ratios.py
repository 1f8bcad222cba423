# backend/modules/feedback/utils/ratios.py

"""Zero-safe averages and percentages used by every feedback rollup."""

from typing import Union

Number = Union[int, float]


def safe_ratio(numerator: Number, denominator: Number) -> float:
    """Return ``numerator / denominator``, or 0.0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


def percent_change(current: Number, previous: Number) -> float:
    """Period-over-period change in percent; 0.0 when there is no baseline."""
    return safe_ratio(current - previous, previous) * 100
