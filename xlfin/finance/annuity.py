# xlfin/finance/annuity.py
"""
Annuity factors and the raw closed forms built on them:
 - fv_factor / pv_factor
 - annuity_certain_pv_factor / annuity_certain_fv_factor
 - nper_factor
 - fv / pv / pmt / nper (no argument checks; see finance.tvm)

`pd` is the payment timing as a number: 0 = end of period, 1 = beginning.
Float semantics follow IEEE-754 the way a spreadsheet does: where plain
Python would raise (0 ** -n, overflow) we return inf, and a negative base
with a fractional exponent gives nan instead of a complex number.
"""

from __future__ import annotations

import math

from .numeric import is_integer


# ---------- Factors ----------
def fv_factor(r: float, nper: float) -> float:
    """(1 + r) ** nper"""
    base = 1.0 + r
    if base < 0 and not is_integer(nper):
        return math.nan
    try:
        return base ** nper
    except ZeroDivisionError:
        return math.inf
    except OverflowError:
        if base < 0 and int(nper) % 2:
            return -math.inf
        return math.inf


def pv_factor(r: float, nper: float) -> float:
    f = fv_factor(r, nper)
    if f == 0:
        return math.inf
    return 1.0 / f


def annuity_certain_pv_factor(r: float, nper: float, pd: int) -> float:
    """PV of 1 paid per period for nper periods; nper itself when r == 0."""
    if r == 0:
        return float(nper)
    return (1.0 + r * pd) * (1.0 - pv_factor(r, nper)) / r


def annuity_certain_fv_factor(r: float, nper: float, pd: int) -> float:
    f = fv_factor(r, nper)
    if f == 0 and r != 0:
        # limit of (1 + r*pd) * (f - 1) / r; the product form would be inf * 0
        return -(1.0 + r * pd) / r
    return annuity_certain_pv_factor(r, nper, pd) * f


def nper_factor(r: float, pmt: float, v: float, pd: int) -> float:
    return v * r + pmt * (1.0 + r * pd)


# ---------- Closed forms ----------
def fv(r: float, nper: float, pmt: float, pv: float, pd: int) -> float:
    return -(pv * fv_factor(r, nper) + pmt * annuity_certain_fv_factor(r, nper, pd))


def pv(r: float, nper: float, pmt: float, fv: float, pd: int) -> float:
    return -(fv * pv_factor(r, nper) + pmt * annuity_certain_pv_factor(r, nper, pd))


def pmt(r: float, nper: float, pv: float, fv: float, pd: int) -> float:
    return -(pv + fv * pv_factor(r, nper)) / annuity_certain_pv_factor(r, nper, pd)


def nper(r: float, pmt: float, pv: float, fv: float, pd: int) -> float:
    """
    ln(nper_factor(-fv) / nper_factor(pv)) / ln(1 + r)

    Raises ValueError / ZeroDivisionError on a non-positive log argument or
    r == 0; the tvm layer turns those into NumericDegenerateError.
    """
    ratio = nper_factor(r, pmt, -fv, pd) / nper_factor(r, pmt, pv, pd)
    return math.log(ratio) / math.log(1.0 + r)


__all__ = [
    "fv_factor",
    "pv_factor",
    "annuity_certain_pv_factor",
    "annuity_certain_fv_factor",
    "nper_factor",
    "fv",
    "pv",
    "pmt",
    "nper",
]
