"""
Pure numeric helpers shared by the analytics modules.

All functions are pure and typed for testability.
"""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round to the given number of decimals, halves going up.

    Python's round() uses banker's rounding (round(2.5) == 2); the stats
    figures are specified with halves rounding towards +inf instead, so
    0.5 → 1, 2.25 → 2.3 (digits=1), -0.5 → 0.

    Args:
        value: Value to round
        digits: Decimal places to keep

    Returns:
        Rounded value
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def percent_gain(first: float, latest: float) -> float:
    """
    Percentage change from first to latest, rounded to 2 decimals.

    Args:
        first: Starting value (must be non-zero)
        latest: Latest value

    Returns:
        Percent change, e.g. 60 → 75 gives 25.0
    """
    return round_half_up((latest - first) / first * 100, 2)


def mean(values: list[float]) -> float:
    """Arithmetic mean, 0.0 for an empty list."""
    if not values:
        return 0.0
    return sum(values) / len(values)
