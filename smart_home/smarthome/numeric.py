"""Numeric helpers shared by the scoring and weather code."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves towards +inf (``Math.round`` semantics), not to even."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
