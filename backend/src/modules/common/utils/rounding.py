"""Rounding helpers for user-facing percentages."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative values.

    ``round()`` rounds halves to even, which turns a 62.5% score into 62.
    """
    return int(math.floor(value + 0.5))
