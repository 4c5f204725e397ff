"""Rounding helpers shared by the scoring modules."""

from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round halves away from negative infinity (2.5 -> 3, -2.5 -> -2).

    Python's built-in round() uses banker's rounding; published thresholds
    such as "turbulence 0-10" and "strength to 0.1 m/s" are defined with
    half-up rounding, so every public numeric output goes through here.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Half-up rounding to an int."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp `value` into [lower, upper]."""
    return max(lower, min(upper, value))
