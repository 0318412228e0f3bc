# xlfin/finance/tvm.py
"""
Time-value-of-money solvers with spreadsheet semantics (PV, FV, PMT, NPER, RATE).

Each public function validates its arguments, resolves defaults and then
calls a closed form from finance.annuity, or, for the rate, the root finder
in finance.roots. Failures are raised as subclasses of FinanceError:

  InvalidArgumentsError   undefined / contradictory inputs
  ConvergenceError        root search could not bracket or bisect
  NumericDegenerateError  the closed form produced inf / nan / log(<= 0)

Sign convention: money paid out is negative, money received is positive.
"""

from __future__ import annotations

import logging
import math
from enum import IntEnum
from typing import Optional, Union

from . import annuity
from .errors import InvalidArgumentsError, NumericDegenerateError
from .numeric import is_integer, sign
from .roots import find_root

logger = logging.getLogger(__name__)

DEFAULT_GUESS = 0.1


class PaymentDue(IntEnum):
    END_OF_PERIOD = 0
    BEGINNING_OF_PERIOD = 1


_WHEN_ALIASES = {
    "end": PaymentDue.END_OF_PERIOD,
    "begin": PaymentDue.BEGINNING_OF_PERIOD,
    "beginning": PaymentDue.BEGINNING_OF_PERIOD,
}

When = Union[PaymentDue, int, str, None]


def resolve_when(when: When) -> PaymentDue:
    """Accept PaymentDue, 0/1 or 'end'/'begin'; None means end of period."""
    if when is None:
        return PaymentDue.END_OF_PERIOD
    if isinstance(when, str):
        key = when.strip().lower()
        if key in _WHEN_ALIASES:
            return _WHEN_ALIASES[key]
        if key in ("0", "1"):
            return PaymentDue(int(key))
        raise InvalidArgumentsError(f"unknown payment timing: {when!r}")
    if isinstance(when, bool) or not is_integer(when) or int(when) not in (0, 1):
        raise InvalidArgumentsError(f"unknown payment timing: {when!r}")
    return PaymentDue(int(when))


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise NumericDegenerateError(f"{what} is not a finite number ({value})")
    return value


# ---------- Validated internals ----------
def _calc_fv(r: float, nper: float, pmt: float, pv: float, pd: PaymentDue) -> float:
    if r < -1 and not is_integer(nper):
        raise InvalidArgumentsError()
    if r == -1 and nper < 0:
        raise InvalidArgumentsError()
    if pmt == 0 and pv == 0:
        raise InvalidArgumentsError()

    if r == -1 and pd == PaymentDue.BEGINNING_OF_PERIOD:
        return -(pv * annuity.fv_factor(r, nper))
    if r == -1:
        return -(pv * annuity.fv_factor(r, nper) + pmt)
    return annuity.fv(r, nper, pmt, pv, pd)


# ---------- Public API ----------
def future_value(
    rate: float,
    nper: float,
    pmt: float,
    pv: Optional[float] = 0.0,
    when: When = PaymentDue.END_OF_PERIOD,
) -> float:
    """
    Value after nper periods of a starting balance pv plus level payments pmt.

    At rate == -1 the balance is wiped out in the first period, so only the
    last payment (end of period) survives.
    """
    pv = 0.0 if pv is None else pv
    pd = resolve_when(when)
    return _finite(_calc_fv(rate, nper, pmt, pv, pd), "future value")


def present_value(
    rate: float,
    nper: float,
    pmt: float,
    fv: Optional[float] = 0.0,
    when: When = PaymentDue.END_OF_PERIOD,
) -> float:
    fv = 0.0 if fv is None else fv
    pd = resolve_when(when)
    if rate < -1 and not is_integer(nper):
        raise InvalidArgumentsError()
    if pmt == 0 and fv == 0:
        raise InvalidArgumentsError()
    if rate == -1:
        raise InvalidArgumentsError("present value is undefined at rate -100%")
    return _finite(annuity.pv(rate, nper, pmt, fv, pd), "present value")


def payment(
    rate: float,
    nper: float,
    pv: float,
    fv: Optional[float] = 0.0,
    when: When = PaymentDue.END_OF_PERIOD,
) -> float:
    """
    Level payment that takes a balance of pv to fv in nper periods.

    >>> round(payment(0.005, 60, -10000), 2)
    193.33
    """
    fv = 0.0 if fv is None else fv
    pd = resolve_when(when)
    if rate < -1 and not is_integer(nper):
        raise InvalidArgumentsError()
    if fv == 0 and pv == 0:
        raise InvalidArgumentsError()
    if rate == -1 and (nper == 0 or pd == PaymentDue.BEGINNING_OF_PERIOD):
        raise InvalidArgumentsError()
    if annuity.annuity_certain_pv_factor(rate, nper, pd) == 0:
        raise InvalidArgumentsError("annuity factor is zero")

    if rate == -1:
        return -fv
    return _finite(annuity.pmt(rate, nper, pv, fv, pd), "payment")


def number_of_periods(
    rate: float,
    pmt: float,
    pv: float,
    fv: Optional[float] = 0.0,
    when: When = PaymentDue.END_OF_PERIOD,
) -> float:
    fv = 0.0 if fv is None else fv
    pd = resolve_when(when)
    if pmt == 0 and (pv == 0 or fv == 0):
        raise InvalidArgumentsError()

    if rate == 0 and pmt != 0:
        return -(fv + pv) / pmt
    if rate <= -1:
        raise NumericDegenerateError("number of periods is undefined at rate <= -100%")
    try:
        result = annuity.nper(rate, pmt, pv, fv, pd)
    except (ValueError, ZeroDivisionError) as e:
        raise NumericDegenerateError(f"number of periods has no solution: {e}") from e
    return _finite(result, "number of periods")


def rate(
    nper: float,
    pmt: float,
    pv: float,
    fv: Optional[float] = 0.0,
    when: When = PaymentDue.END_OF_PERIOD,
    guess: Optional[float] = DEFAULT_GUESS,
) -> float:
    """
    Periodic interest rate of an annuity, found numerically.

    Rejects sign patterns for which FV(r) - fv cannot change sign on
    (-1, inf). With no pv and no fv the loan is repaid to nothing, which is
    a total loss per period: -sign(pmt) is returned without iterating.
    """
    fv = 0.0 if fv is None else fv
    guess = DEFAULT_GUESS if guess is None else guess
    pd = resolve_when(when)

    if (pmt == 0 and pv == 0) or nper == 0:
        raise InvalidArgumentsError()

    s_pmt, s_pv, s_fv = sign(pmt), sign(pv), sign(fv)
    if (
        (s_pmt == s_pv and s_pv == s_fv)
        or (s_pmt == s_pv and fv == 0)
        or (s_pmt == s_fv and pv == 0)
        or (s_pv == s_fv and pmt == 0)
    ):
        raise InvalidArgumentsError("cash flows never change sign; no rate exists")

    if fv == 0 and pv == 0:
        return -s_pmt

    def objective(r: float) -> float:
        return _calc_fv(r, nper, pmt, pv, pd) - fv

    result = find_root(objective, guess)
    logger.debug("rate(nper=%s, pmt=%s, pv=%s, fv=%s) -> %s", nper, pmt, pv, fv, result)
    return _finite(result, "rate")


__all__ = [
    "DEFAULT_GUESS",
    "PaymentDue",
    "resolve_when",
    "future_value",
    "present_value",
    "payment",
    "number_of_periods",
    "rate",
]
