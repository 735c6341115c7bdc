"""Decimal rounding helpers for reported figures.

Recorded durations, costs and aggregated statistics carry fixed
decimal-place contracts. Python's built-in ``round`` rounds half to even
on the binary float, so values like 0.125 can round down unexpectedly.
These helpers round half away from zero on the decimal representation.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float | int | Decimal, places: int) -> float:
    """Round ``value`` to ``places`` decimal places, half away from zero.

    Args:
        value: Number to round.
        places: Decimal places to keep (>= 0).

    Returns:
        float: Rounded value.

    Example:
        >>> round_half_up(1.23456, 3)
        1.235
        >>> round_half_up(0.125, 2)
        0.13
    """
    if places < 0:
        raise ValueError(f"places must be >= 0, got {places}")
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
