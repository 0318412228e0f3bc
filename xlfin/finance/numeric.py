# xlfin/finance/numeric.py
from __future__ import annotations

import math


def sign(x: float) -> float:
    """Return -1, 0 or 1. NaN passes through unchanged."""
    x = float(x)
    if x == 0 or math.isnan(x):
        return x
    return 1.0 if x > 0 else -1.0


def is_integer(n: float) -> bool:
    try:
        return math.isfinite(n) and float(n) == int(n)
    except (TypeError, ValueError):
        return False


__all__ = ["sign", "is_integer"]
