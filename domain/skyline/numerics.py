"""Skyline Bounded Context - Numeric Helpers.

Compensated (Neumaier) summation used wherever an angle is offset into
[0, pi] so that the half-pi offset does not swallow small arctangents.
"""

from __future__ import annotations

from collections.abc import Iterable


def compensated_sum(values: Iterable[float]) -> float:
    """Sum values with a running Neumaier compensation term.

    The compensation collects the low-order bits lost by each addition and is
    folded back in at the end, so the result is exact to within one rounding
    for terms of very different magnitude or cancelling sign.

    Args:
        values: Any iterable of numbers (empty yields 0.0)

    Returns:
        The compensated sum as a float

    Example:
        >>> compensated_sum([1.0, 1e100, 1.0, -1e100])
        2.0
    """
    total = 0.0
    compensation = 0.0
    for value in values:
        value = float(value)
        t = total + value
        if abs(total) >= abs(value):
            compensation += (total - t) + value
        else:
            compensation += (value - t) + total
        total = t
    return total + compensation
