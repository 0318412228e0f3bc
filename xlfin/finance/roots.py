# xlfin/finance/roots.py
"""
Scalar root finding used by the rate solver.

find_root runs Newton-Raphson first and falls back to an expanding bracket
search followed by bisection. All three helpers are plain loops with hard
iteration ceilings; none of them keeps state between calls.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, Tuple

from .errors import ConvergenceError, FinanceError, InvalidArgumentsError
from .numeric import sign

logger = logging.getLogger(__name__)

Objective = Callable[[float], float]

PRECISION = 1e-7
NEWTON_MAX_ITER = 20
BOUNDS_MAX_TRIES = 60
BOUNDS_SHIFT = 0.01
BOUNDS_FACTOR = 1.6
BISECTION_MAX_ITER = 200


# ---------- Newton ----------
def newton(f: Objective, x: float, precision: float = PRECISION) -> Optional[float]:
    """
    Newton-Raphson with a central-difference derivative (step = precision).

    Returns None when there is no result: no convergence within
    NEWTON_MAX_ITER steps, a flat derivative, or an iterate the objective
    refuses (e.g. a rate below -100% with fractional nper).
    """
    for _ in range(NEWTON_MAX_ITER):
        try:
            fx = f(x)
            dfx = (f(x + precision) - f(x - precision)) / (2.0 * precision)
            new_x = x - fx / dfx
        except (FinanceError, ZeroDivisionError):
            return None
        if abs(new_x - x) < precision:
            return new_x
        x = new_x
    return None


# ---------- Bracket search ----------
def find_bounds(
    f: Objective,
    guess: float,
    min_bound: float,
    max_bound: float,
    precision: float = PRECISION,
) -> Tuple[float, float]:
    """
    Widen [guess - 0.01, guess + 0.01] by BOUNDS_FACTOR per side until the
    objective changes sign. Both ends stay strictly inside (min_bound, max_bound).
    """
    if guess <= min_bound or guess >= max_bound:
        raise InvalidArgumentsError(
            f"guess {guess} outside the search domain ({min_bound}, {max_bound})"
        )

    def clamp(value: float, *, low: bool) -> float:
        if low:
            return min_bound + precision if value <= min_bound else value
        return max_bound - precision if value >= max_bound else value

    lower = clamp(guess - BOUNDS_SHIFT, low=True)
    upper = clamp(guess + BOUNDS_SHIFT, low=False)
    for _ in range(BOUNDS_MAX_TRIES):
        product = f(lower) * f(upper)
        if product <= 0:
            return lower, upper
        if not product > 0:
            # nan: one end evaluated to something not comparable
            raise ConvergenceError(f"bracket search failed at [{lower}, {upper}]")
        lower, upper = (
            clamp(lower + BOUNDS_FACTOR * (lower - upper), low=True),
            clamp(upper + BOUNDS_FACTOR * (upper - lower), low=False),
        )
    raise ConvergenceError(f"findBounds gave up after {BOUNDS_MAX_TRIES} tries")


# ---------- Bisection ----------
def bisection(f: Objective, a: float, b: float, precision: float = PRECISION) -> float:
    """Bisection on a bracket [a, b] with f(a) * f(b) <= 0."""
    fa = f(a)
    if abs(fa) < precision:
        return a
    fb = f(b)
    if abs(fb) < precision:
        return b

    for _ in range(BISECTION_MAX_ITER):
        if a == b:
            raise ConvergenceError("bisection interval collapsed without converging")
        if fa * fb > 0:
            raise ConvergenceError(f"bisection bracket [{a}, {b}] holds no sign change")

        mid = a + 0.5 * (b - a)
        fmid = f(mid)
        if abs(fmid) < precision:
            return mid
        # keep the sub-interval where the sign changes
        if fa * fmid < 0:
            b, fb = mid, fmid
        elif fa * fmid > 0:
            a, fa = mid, fmid
        else:
            raise ConvergenceError(f"bisection hit a non-finite value at {mid}")
    raise ConvergenceError(f"bisection did not converge in {BISECTION_MAX_ITER} steps")


# ---------- Combined ----------
def find_root(f: Objective, guess: float, precision: float = PRECISION) -> float:
    """
    Newton first; its answer is kept only when it has the same sign as the
    guess. Otherwise bracket the root starting from the guess and bisect.
    """
    value = newton(f, guess, precision)
    if value is not None and sign(guess) == sign(value):
        return value

    logger.debug(
        "newton from guess=%s gave %s; falling back to bracket search", guess, value
    )
    lower, upper = find_bounds(f, guess, -1.0, sys.float_info.max, precision)
    logger.debug("bisecting bracket [%s, %s]", lower, upper)
    return bisection(f, lower, upper, precision)


__all__ = [
    "PRECISION",
    "NEWTON_MAX_ITER",
    "BOUNDS_MAX_TRIES",
    "BISECTION_MAX_ITER",
    "newton",
    "find_bounds",
    "bisection",
    "find_root",
]
