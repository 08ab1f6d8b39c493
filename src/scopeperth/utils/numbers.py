"""Rounding and median helpers shared by the metrics modules."""

import math
from typing import Optional, Sequence, Union

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding; published figures round
    $x.5 up.
    """
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def upper_median(values: Sequence[Number]) -> Optional[Number]:
    """Element at index n // 2 of the sorted values.

    For an even count this is the upper of the two middle elements, not
    their mean: [100, 200, 300, 400] -> 300.
    """
    if not values:
        return None
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def mean_median(values: Sequence[Number]) -> Optional[int]:
    """Textbook median (mean of the two middle elements), rounded."""
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return round_half_up(ordered[mid])
    return round_half_up((ordered[mid - 1] + ordered[mid]) / 2)


def percent_change(value: Number, base: Number) -> Optional[float]:
    """(value - base) / base * 100, or None when base is zero."""
    if not base:
        return None
    return (value - base) / base * 100
